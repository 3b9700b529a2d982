"""
Decision specification models.

A DecisionSpec is the static configuration of one decision context:
- the ordered candidate categories (brand names, or authentic/not_authentic)
- the configured signal methods, in evaluation order
- the per-method weights (non-negative, need not sum to 1)
- the decision threshold (outcome is confidence > threshold)

Example YAML:
```yaml
name: brand_detection
categories: [Louis Vuitton, Gucci, Chanel]
weights:
  logo: 0.5
  colors: 0.3
  patterns: 0.2
threshold: 0.6
```
"""
import json
import math
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.evaluation.categories import CandidateRegistry


class DecisionSpec(BaseModel):
    """
    Validated, read-only configuration for one decision context.

    Every configuration problem surfaces as ConfigurationError at
    construction time, never during a request.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=50)
    categories: List[str] = Field(default_factory=list)
    weights: Dict[str, float] = Field(default_factory=dict)
    methods: List[str] = Field(
        default_factory=list,
        description="Configured methods in evaluation order (defaults to weight order)"
    )
    threshold: float = 0.5

    @model_validator(mode="before")
    @classmethod
    def default_methods(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("methods"):
            data = dict(data)
            data["methods"] = list((data.get("weights") or {}).keys())
        return data

    @model_validator(mode="after")
    def validate_decision(self):
        # Builds (and so validates) the registry
        CandidateRegistry(self.name, self.categories)

        if not math.isfinite(self.threshold) or not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(
                f"Decision '{self.name}': threshold must be in [0, 1], got {self.threshold}"
            )

        invalid = sorted(
            m for m, w in self.weights.items() if not math.isfinite(w) or w < 0.0
        )
        if invalid:
            raise ConfigurationError(
                f"Decision '{self.name}': weights must be finite and non-negative; "
                f"invalid for methods {invalid}"
            )

        if len(set(self.methods)) != len(self.methods):
            raise ConfigurationError(f"Decision '{self.name}': duplicate methods in {self.methods}")

        unknown = sorted(set(self.weights) - set(self.methods))
        if unknown:
            raise ConfigurationError(
                f"Decision '{self.name}': weights reference unconfigured methods {unknown}"
            )
        return self

    @property
    def registry(self) -> CandidateRegistry:
        return CandidateRegistry(self.name, self.categories)

    def weight_for(self, method: str) -> float:
        """Configured weight of a method (0 when none is configured)."""
        return self.weights.get(method, 0.0)

    def with_overrides(
        self,
        weights: Optional[Dict[str, float]] = None,
        threshold: Optional[float] = None
    ) -> "DecisionSpec":
        """Return a new validated spec with weights and/or threshold replaced."""
        data = self.model_dump()
        if weights is not None:
            merged = dict(self.weights)
            merged.update(weights)
            data["weights"] = merged
            data["methods"] = self.methods + [m for m in weights if m not in self.methods]
        if threshold is not None:
            data["threshold"] = threshold
        return self.from_dict(data)

    # ===== LOADING =====

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DecisionSpec":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid decision spec: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "DecisionSpec":
        """Parse from YAML string."""
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Decision spec YAML root must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_json(cls, json_str: str) -> "DecisionSpec":
        """Parse from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Decision spec JSON root must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: str) -> "DecisionSpec":
        """Load from YAML or JSON file."""
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        if file_path.endswith(".json"):
            return cls.from_json(content)
        return cls.from_yaml(content)

    def to_yaml(self) -> str:
        """Export to YAML string."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_decision_specs(file_path: str) -> Dict[str, DecisionSpec]:
    """
    Load several decision specs from one YAML file.

    The file holds a `decisions` list; each entry is a DecisionSpec mapping.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("decisions"), list):
        raise ConfigurationError(f"{file_path}: expected a 'decisions' list")

    specs: Dict[str, DecisionSpec] = {}
    for i, entry in enumerate(data["decisions"]):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{file_path}: decisions[{i}] must be a mapping")
        spec = DecisionSpec.from_dict(entry)
        if spec.name in specs:
            raise ConfigurationError(f"{file_path}: duplicate decision '{spec.name}'")
        specs[spec.name] = spec
    return specs
