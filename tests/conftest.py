import pytest

from dossier.citations.ledger import CitationLedger
from dossier.citations.intake import ManualIntake


class FakeProbe:
    """Probe with scripted outcomes; unknown URLs are reachable."""

    def __init__(self, outcomes=None, default=True):
        self.outcomes = dict(outcomes or {})
        self.default = default
        self.calls = []

    async def check(self, url):
        self.calls.append(url)
        result = self.outcomes.get(url, self.default)
        if isinstance(result, list):
            return result.pop(0)
        return result


REPORT = """## Market Overview

Vendors are consolidating [Gartner](https://gartner.com/a) and **fast**.

### Key Limitations

- Lock-in risk [Forrester](https://forrester.com/b)
1. First ranked item
![chart](https://img.example.com/c.png)

| Tool | Critical Flaw |
|---|---|
| Alpha | Cost [Gartner again](https://gartner.com/a) |

```
A --> B
```
"""


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def ledger(probe):
    return CitationLedger(probe)


@pytest.fixture
def intake(probe):
    return ManualIntake(probe)


@pytest.fixture
def report_text():
    return REPORT
