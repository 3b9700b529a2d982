"""
Tests for DecisionSpec validation and loading.

Verifies that:
- Valid specs load from dicts, YAML, JSON and files
- Every configuration problem raises ConfigurationError
- Overrides produce new validated specs
"""
import json

import pytest
from pydantic import ValidationError

from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.evaluation.spec import DecisionSpec, load_decision_specs


@pytest.fixture
def spec_data():
    """A valid brand decision."""
    return {
        "name": "brand_detection",
        "categories": ["Louis Vuitton", "Gucci", "Chanel"],
        "weights": {"logo": 0.5, "colors": 0.3, "patterns": 0.2},
        "threshold": 0.6,
    }


class TestDecisionSpecValidation:
    """Tests for DecisionSpec validation."""

    def test_valid_spec(self, spec_data):
        """Test a valid spec and its defaults."""
        spec = DecisionSpec.from_dict(spec_data)
        assert spec.methods == ["logo", "colors", "patterns"]
        assert list(spec.registry) == ["Louis Vuitton", "Gucci", "Chanel"]
        assert spec.weight_for("colors") == 0.3
        assert spec.weight_for("stitching") == 0.0

    def test_explicit_methods_order(self, spec_data):
        """Test that explicit methods keep their order and may be unweighted."""
        spec_data["methods"] = ["patterns", "logo", "colors", "texture"]
        spec = DecisionSpec.from_dict(spec_data)
        assert spec.methods == ["patterns", "logo", "colors", "texture"]
        assert spec.weight_for("texture") == 0.0

    def test_negative_weight_rejected(self, spec_data):
        """Test that a negative weight is a configuration error."""
        spec_data["weights"]["colors"] = -0.1
        with pytest.raises(ConfigurationError, match="finite and non-negative"):
            DecisionSpec.from_dict(spec_data)

    @pytest.mark.parametrize("weight", [float("inf"), float("nan")])
    def test_non_finite_weight_rejected(self, spec_data, weight):
        """Test that infinite and NaN weights are configuration errors."""
        spec_data["weights"]["logo"] = weight
        with pytest.raises(ConfigurationError, match="finite and non-negative"):
            DecisionSpec.from_dict(spec_data)

    def test_weight_for_unconfigured_method_rejected(self, spec_data):
        """Test that weights may only name configured methods."""
        spec_data["methods"] = ["logo", "colors"]
        with pytest.raises(ConfigurationError, match="unconfigured methods"):
            DecisionSpec.from_dict(spec_data)

    @pytest.mark.parametrize("threshold", [-0.1, 1.01, float("nan")])
    def test_threshold_out_of_range_rejected(self, spec_data, threshold):
        """Test that thresholds must lie in [0, 1]."""
        spec_data["threshold"] = threshold
        with pytest.raises(ConfigurationError, match="threshold"):
            DecisionSpec.from_dict(spec_data)

    def test_empty_registry_rejected(self, spec_data):
        """Test that a decision needs at least one category."""
        spec_data["categories"] = []
        with pytest.raises(ConfigurationError, match="empty"):
            DecisionSpec.from_dict(spec_data)

    def test_unknown_in_registry_rejected(self, spec_data):
        """Test that the Unknown sentinel is not a valid category."""
        spec_data["categories"].append("Unknown")
        with pytest.raises(ConfigurationError):
            DecisionSpec.from_dict(spec_data)

    def test_duplicate_methods_rejected(self, spec_data):
        """Test that methods are listed once."""
        spec_data["methods"] = ["logo", "colors", "patterns", "logo"]
        with pytest.raises(ConfigurationError, match="duplicate methods"):
            DecisionSpec.from_dict(spec_data)

    def test_type_errors_become_configuration_errors(self, spec_data):
        """Test that schema violations surface as ConfigurationError."""
        spec_data["weights"] = {"logo": "heavy"}
        with pytest.raises(ConfigurationError, match="Invalid decision spec"):
            DecisionSpec.from_dict(spec_data)

    def test_spec_is_frozen(self, spec_data):
        """Test that a spec cannot be modified after validation."""
        spec = DecisionSpec.from_dict(spec_data)
        with pytest.raises(ValidationError):
            spec.threshold = 0.9


class TestDecisionSpecOverrides:
    """Tests for with_overrides()."""

    def test_weight_override_merges(self, spec_data):
        """Test that overrides merge into the existing weights."""
        spec = DecisionSpec.from_dict(spec_data)
        updated = spec.with_overrides(weights={"logo": 0.8})

        assert updated.weights == {"logo": 0.8, "colors": 0.3, "patterns": 0.2}
        assert spec.weights["logo"] == 0.5  # original untouched

    def test_new_method_appended(self, spec_data):
        """Test that a weight for a new method adds that method last."""
        spec = DecisionSpec.from_dict(spec_data)
        updated = spec.with_overrides(weights={"texture": 0.1})
        assert updated.methods == ["logo", "colors", "patterns", "texture"]

    def test_threshold_override(self, spec_data):
        """Test threshold replacement."""
        spec = DecisionSpec.from_dict(spec_data)
        assert spec.with_overrides(threshold=0.75).threshold == 0.75

    def test_invalid_override_rejected(self, spec_data):
        """Test that overrides are validated like any spec."""
        spec = DecisionSpec.from_dict(spec_data)
        with pytest.raises(ConfigurationError):
            spec.with_overrides(weights={"logo": -1.0})


class TestDecisionSpecLoading:
    """Tests for YAML/JSON loading."""

    def test_from_yaml(self):
        """Test loading from a YAML string."""
        spec = DecisionSpec.from_yaml(
            "name: watch_brand\n"
            "categories: [Rolex, Omega]\n"
            "weights:\n"
            "  logo: 1.0\n"
            "threshold: 0.7\n"
        )
        assert spec.name == "watch_brand"
        assert spec.methods == ["logo"]
        assert spec.threshold == 0.7

    def test_from_json(self, spec_data):
        """Test loading from a JSON string."""
        spec = DecisionSpec.from_json(json.dumps(spec_data))
        assert spec.weights == spec_data["weights"]

    def test_invalid_yaml_rejected(self):
        """Test that malformed YAML is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            DecisionSpec.from_yaml("name: [unclosed")

    def test_yaml_root_must_be_mapping(self):
        """Test that a YAML list is rejected."""
        with pytest.raises(ConfigurationError, match="mapping"):
            DecisionSpec.from_yaml("- logo\n- colors\n")

    def test_invalid_json_rejected(self):
        """Test that malformed JSON is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            DecisionSpec.from_json("{not json")

    def test_from_file(self, tmp_path, spec_data):
        """Test loading from YAML and JSON files."""
        yaml_file = tmp_path / "brand.yaml"
        yaml_file.write_text(DecisionSpec.from_dict(spec_data).to_yaml(), encoding="utf-8")
        json_file = tmp_path / "brand.json"
        json_file.write_text(json.dumps(spec_data), encoding="utf-8")

        from_yaml = DecisionSpec.from_file(str(yaml_file))
        from_json = DecisionSpec.from_file(str(json_file))
        assert from_yaml == from_json

    def test_load_decision_specs(self, tmp_path):
        """Test loading several decisions from one file."""
        path = tmp_path / "decisions.yaml"
        path.write_text(
            "decisions:\n"
            "  - name: watch_brand\n"
            "    categories: [Rolex, Omega]\n"
            "    weights: {logo: 1.0}\n"
            "  - name: shoe_brand\n"
            "    categories: [Nike, Adidas]\n"
            "    weights: {logo: 0.6, colors: 0.4}\n"
            "    threshold: 0.55\n",
            encoding="utf-8",
        )
        specs = load_decision_specs(str(path))
        assert sorted(specs) == ["shoe_brand", "watch_brand"]
        assert specs["shoe_brand"].threshold == 0.55

    def test_load_duplicate_decisions_rejected(self, tmp_path):
        """Test that a decision name may appear once per file."""
        path = tmp_path / "decisions.yaml"
        path.write_text(
            "decisions:\n"
            "  - {name: a, categories: [x], weights: {logo: 1.0}}\n"
            "  - {name: a, categories: [y], weights: {logo: 1.0}}\n",
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError, match="duplicate decision"):
            load_decision_specs(str(path))

    def test_load_requires_decisions_list(self, tmp_path):
        """Test that the file must hold a decisions list."""
        path = tmp_path / "decisions.yaml"
        path.write_text("name: lonely\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="decisions"):
            load_decision_specs(str(path))
