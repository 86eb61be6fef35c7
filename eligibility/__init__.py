"""
Eligibility.

============================================================
AIRDROP ELIGIBILITY SCORING
============================================================

Evaluates declarative criteria against a wallet's
UserActivity snapshot and reports, per project, which
criteria are met and the rounded percentage met.

============================================================
USAGE
============================================================

```python
from eligibility import EligibilityScorer, Project, parse_check

project = Project(
    project_id="zora",
    name="Zora",
    criteria=[
        parse_check("protocol=zora", "Minted on Zora"),
        parse_check("base_tx>=10", "10+ transactions on Base"),
    ],
)
report = EligibilityScorer().score_project(project, activity)
print(report.score)
```

============================================================
"""

from .models import (
    CriterionKind,
    ComparisonOperator,
    ProjectStatus,
    Criterion,
    CriterionResult,
    Project,
    EligibilityReport,
    NUMERIC_KINDS,
)
from .config import EligibilityConfig, get_config, set_config, load_config
from .exceptions import (
    EligibilityError,
    CriterionParseError,
    UnsupportedCriterionError,
    ConfigurationError,
)
from .checker import CriteriaChecker, CriterionHandler, DEFAULT_HANDLERS, parse_check
from .scorer import EligibilityScorer, calculate_criteria_percentage
from .schemas import CriterionSchema, ProjectSchema, load_projects, projects_from_dicts


__all__ = [
    # Models
    "CriterionKind",
    "ComparisonOperator",
    "ProjectStatus",
    "Criterion",
    "CriterionResult",
    "Project",
    "EligibilityReport",
    "NUMERIC_KINDS",
    # Config
    "EligibilityConfig",
    "get_config",
    "set_config",
    "load_config",
    # Exceptions
    "EligibilityError",
    "CriterionParseError",
    "UnsupportedCriterionError",
    "ConfigurationError",
    # Checking
    "CriteriaChecker",
    "CriterionHandler",
    "DEFAULT_HANDLERS",
    "parse_check",
    # Scoring
    "EligibilityScorer",
    "calculate_criteria_percentage",
    # Schemas
    "CriterionSchema",
    "ProjectSchema",
    "load_projects",
    "projects_from_dicts",
]
