"""
Unit tests for provider configuration and the provider registry.

Tests config validation, preset lookups and stored-input validation.
"""

import pytest

from hosting_calculator.core.provider_config import (
    InputField,
    PersistenceKeys,
    ProviderConfig,
    validate_inputs,
)
from hosting_calculator.core.types import CostResult
from hosting_calculator.providers import (
    CLOUDFLARE_CONFIG,
    VERCEL_CONFIG,
    get_provider,
    list_providers,
)


def _flat_engine(inputs, plan, team_members=1):
    return CostResult(base_price=1.0, usage_charges=0.0, credits_applied=0.0, total=1.0)


def _make_config(**overrides):
    kwargs = dict(
        name="Example",
        default_inputs={"requests": 0, "extra": None},
        plan_presets={"basic": {"requests": 10, "extra": None}},
        calculate=_flat_engine,
        persistence_keys=PersistenceKeys(inputs="example-inputs"),
        fields=(
            InputField("requests", "Requests", "req", "Core"),
            InputField("extra", "Extra", "units", "Core", optional=True),
        ),
    )
    kwargs.update(overrides)
    return ProviderConfig(**kwargs)


class TestRegistry:
    """Test provider lookup."""

    def test_list_providers(self):
        """Both providers are registered in order."""
        assert list_providers() == ["cloudflare", "vercel"]

    def test_get_provider_case_insensitive(self):
        """Lookups ignore case and surrounding whitespace."""
        assert get_provider("Cloudflare") is CLOUDFLARE_CONFIG
        assert get_provider(" VERCEL ") is VERCEL_CONFIG

    def test_unsupported_provider_raises_error(self):
        """Unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unsupported provider: aws"):
            get_provider("aws")


class TestProviderConfig:
    """Test ProviderConfig validation and helpers."""

    def test_empty_presets_raise_error(self):
        """At least one plan preset is required."""
        with pytest.raises(ValueError, match="at least one plan"):
            _make_config(plan_presets={})

    def test_empty_name_raises_error(self):
        """A provider needs a name."""
        with pytest.raises(ValueError, match="provider name is required"):
            _make_config(name="  ")

    def test_empty_inputs_key_raises_error(self):
        """The inputs persistence key cannot be blank."""
        with pytest.raises(ValueError, match="inputs persistence key"):
            PersistenceKeys(inputs="")

    def test_persistence_key_names(self):
        """Only declared keys are listed."""
        assert CLOUDFLARE_CONFIG.persistence_keys.names() == [
            "hosting-calc-cloudflare-inputs",
            "hosting-calc-cloudflare-plan",
        ]
        assert len(VERCEL_CONFIG.persistence_keys.names()) == 3

    def test_first_plan(self):
        """The first declared preset is the starting plan."""
        assert CLOUDFLARE_CONFIG.first_plan == "free"
        assert VERCEL_CONFIG.first_plan == "hobby"

    def test_preset_for_returns_copy(self):
        """Mutating a returned preset never changes the config."""
        preset = VERCEL_CONFIG.preset_for("pro")
        preset["edgeRequests"] = 1
        assert VERCEL_CONFIG.plan_presets["pro"]["edgeRequests"] == 10_000_000

    def test_preset_for_unknown_plan(self):
        """Unknown plans have no preset."""
        assert CLOUDFLARE_CONFIG.preset_for("enterprise") is None

    def test_field_keys_fall_back_to_defaults(self):
        """Configs without field descriptors use the default inputs' keys."""
        config = _make_config(fields=())
        assert config.field_keys() == ["requests", "extra"]

    def test_get_unknown_field_raises_error(self):
        """Unknown input names are rejected."""
        with pytest.raises(ValueError, match="Unknown input for Cloudflare: bogus"):
            CLOUDFLARE_CONFIG.get_field("bogus")

    @pytest.mark.parametrize("config", [CLOUDFLARE_CONFIG, VERCEL_CONFIG], ids=lambda c: c.name)
    def test_fields_match_every_preset(self, config):
        """Every preset and the defaults cover exactly the declared fields."""
        keys = set(config.field_keys())
        assert set(config.default_inputs) == keys
        for preset in config.plan_presets.values():
            assert set(preset) == keys


class TestValidateInputs:
    """Test validation of decoded stored inputs."""

    def test_valid_inputs(self):
        """A complete mapping is accepted and copied."""
        data = {"requests": 5, "extra": 2.5}
        result = validate_inputs(_make_config(), data)
        assert result == data
        assert result is not data

    def test_optional_field_may_be_absent(self):
        """Absent optional fields stay absent."""
        assert validate_inputs(_make_config(), {"requests": 5}) == {"requests": 5}

    def test_optional_field_may_be_null(self):
        """An explicit null for an optional field is kept."""
        assert validate_inputs(_make_config(), {"requests": 5, "extra": None}) == {"requests": 5, "extra": None}

    def test_non_finite_raises_error(self):
        """Infinity and NaN are not usage amounts."""
        for bad in (float("inf"), float("nan")):
            with pytest.raises(ValueError, match="must be a number"):
                validate_inputs(_make_config(), {"requests": bad})

    def test_non_mapping_raises_error(self):
        """Lists and scalars are not inputs."""
        with pytest.raises(ValueError, match="must be an object"):
            validate_inputs(_make_config(), [1, 2, 3])

    def test_unknown_key_raises_error(self):
        """Keys outside the provider's fields are rejected."""
        with pytest.raises(ValueError, match="Unknown Example inputs"):
            validate_inputs(_make_config(), {"requests": 1, "bogus": 2})

    def test_missing_required_raises_error(self):
        """Required fields must be present."""
        with pytest.raises(ValueError, match="Missing required Example input: requests"):
            validate_inputs(_make_config(), {"extra": 1})

    def test_non_numeric_raises_error(self):
        """Strings and booleans are not usage amounts."""
        with pytest.raises(ValueError, match="must be a number"):
            validate_inputs(_make_config(), {"requests": "10"})
        with pytest.raises(ValueError, match="must be a number"):
            validate_inputs(_make_config(), {"requests": True})

    def test_real_presets_validate(self):
        """The shipped presets satisfy their own shape."""
        for config in (CLOUDFLARE_CONFIG, VERCEL_CONFIG):
            for preset in config.plan_presets.values():
                assert validate_inputs(config, preset) == preset
