"""
Pydantic Schemas for Eligibility Projects.

Projects and their criteria are defined outside the engine
(YAML files, API payloads). A criterion is given either as a
legacy `check` string or as an explicit `kind` + `params`.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .checker import parse_check
from .exceptions import ConfigurationError
from .models import Criterion, CriterionKind, Project, ProjectStatus


logger = logging.getLogger(__name__)


# =============================================================
# CRITERIA
# =============================================================

class CriterionSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str = ""
    check: Optional[str] = None
    kind: Optional[CriterionKind] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_or_kind(self) -> "CriterionSchema":
        if (self.check is None) == (self.kind is None):
            raise ValueError("exactly one of 'check' or 'kind' is required")
        return self

    def to_criterion(self) -> Criterion:
        """Raises CriterionParseError for a malformed check string."""
        if self.check is not None:
            return parse_check(self.check, self.description)
        return Criterion(kind=self.kind, params=self.params, description=self.description)


# =============================================================
# PROJECTS
# =============================================================

class ProjectSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    project_id: str = Field(alias="id")
    name: str
    status: ProjectStatus = ProjectStatus.SPECULATIVE
    criteria: List[CriterionSchema] = Field(default_factory=list)

    def to_project(self) -> Project:
        return Project(
            project_id=self.project_id,
            name=self.name,
            status=self.status,
            criteria=[c.to_criterion() for c in self.criteria],
        )


def projects_from_dicts(records: List[Dict[str, Any]]) -> List[Project]:
    """Validate project dicts and convert them to Project objects."""
    return [ProjectSchema.model_validate(record).to_project() for record in records]


def load_projects(path: Path) -> List[Project]:
    """
    Load projects from the `projects:` list of a YAML file.

    Raises:
        ConfigurationError: the file has no `projects` list
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    records = data.get("projects")
    if not isinstance(records, list):
        raise ConfigurationError(
            "'projects' must be a list",
            details={"path": str(path)},
        )

    projects = projects_from_dicts(records)
    logger.info(f"Loaded {len(projects)} eligibility projects from {path}")
    return projects
