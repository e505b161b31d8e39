"""Tests for validate_specimen() and its field validators."""

from typing import Any

import pytest

from wols.errors import WolsErrorCode
from wols.models import Specimen, Strain, as_specimen_id
from wols.validation import Severity, ValidationOptions, validate_specimen


def codes(issues: list[Any]) -> list[str]:
    return [issue.code for issue in issues]


class TestValidateSpecimenBasics:
    """Tests for whole-record validation."""

    def test_minimal_valid(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a minimal record is valid with no warnings."""
        result = validate_specimen(valid_specimen_data)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_none_candidate(self) -> None:
        """Test None yields a single required-field error."""
        result = validate_specimen(None)
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].code == WolsErrorCode.REQUIRED_FIELD.value
        assert result.errors[0].message == "Specimen is required"

    @pytest.mark.parametrize("candidate", ["string", 42, ["a", "b"], True])
    def test_non_object_candidate(self, candidate: Any) -> None:
        """Test non-object candidates yield a single format error."""
        result = validate_specimen(candidate)
        assert codes(result.errors) == [WolsErrorCode.INVALID_FORMAT.value]
        assert result.errors[0].message == "Specimen must be an object"

    def test_specimen_instance(self) -> None:
        """Test a Specimen instance is validated via its wire form."""
        spec = Specimen(
            id=as_specimen_id("wemush:abc123"),
            version="1.2.0",
            type="SPAWN",
            species="Hericium erinaceus",
            strain=Strain(name="Lion's Mane", generation="F1"),
        )
        assert validate_specimen(spec).valid

    def test_empty_object_reports_all_required(self) -> None:
        """Test an empty object reports every required field in schema order."""
        result = validate_specimen({})
        assert [issue.path for issue in result.errors] == [
            "@context",
            "@type",
            "id",
            "version",
            "type",
            "species",
        ]
        assert codes(result.errors) == [
            WolsErrorCode.INVALID_CONTEXT.value,
            WolsErrorCode.INVALID_TYPE.value,
            WolsErrorCode.REQUIRED_FIELD.value,
            WolsErrorCode.REQUIRED_FIELD.value,
            WolsErrorCode.REQUIRED_FIELD.value,
            WolsErrorCode.REQUIRED_FIELD.value,
        ]

    def test_deterministic(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test identical input gives identical issue lists."""
        valid_specimen_data.update({"type": "JAR", "stage": "DONE", "extra": 1})
        first = validate_specimen(valid_specimen_data)
        second = validate_specimen(valid_specimen_data)
        assert first.errors == second.errors
        assert first.warnings == second.warnings

    def test_all_fields_checked(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test validation does not stop at the first error."""
        valid_specimen_data.update({"id": "bad", "version": "one", "type": "JAR", "species": ""})
        result = validate_specimen(valid_specimen_data)
        assert [issue.path for issue in result.errors] == ["id", "version", "type", "species"]


class TestJsonLdMarkers:
    """Tests for @context and @type."""

    def test_wrong_context(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a mismatched context is an error."""
        valid_specimen_data["@context"] = "https://example.com/v1"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_CONTEXT.value]
        assert "https://wemush.com/wols/v1" in result.errors[0].message

    def test_wrong_type_marker(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test @type must be exactly Specimen."""
        valid_specimen_data["@type"] = "specimen"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_TYPE.value]

    def test_markers_strict_even_when_lenient(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test lenient level does not relax the markers."""
        del valid_specimen_data["@context"]
        result = validate_specimen(valid_specimen_data, ValidationOptions(level="lenient"))
        assert not result.valid


class TestRequiredFields:
    """Tests for id, version, type and species."""

    def test_non_string_id(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a numeric id is a format error."""
        valid_specimen_data["id"] = 123
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_FORMAT.value]
        assert result.errors[0].message == "id must be a string"

    def test_id_pattern(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test an id without the namespace prefix is rejected."""
        valid_specimen_data["id"] = "abc123"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_ID_FORMAT.value]
        assert "wemush:[a-z0-9]+" in result.errors[0].message

    @pytest.mark.parametrize("version", ["1.2.0", "0.0.1", "10.20.30", "1.2.0-beta.1", "1.2.0+build.5"])
    def test_valid_versions(self, valid_specimen_data: dict[str, Any], version: str) -> None:
        """Test semver forms with and without qualifiers."""
        valid_specimen_data["version"] = version
        assert validate_specimen(valid_specimen_data).valid

    @pytest.mark.parametrize("version", ["1.2", "v1.2.0", "1.2.0.0", "latest", ""])
    def test_invalid_versions(self, valid_specimen_data: dict[str, Any], version: str) -> None:
        """Test non-semver strings are rejected."""
        valid_specimen_data["version"] = version
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_VERSION.value]

    def test_non_string_version(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a numeric version uses the version code."""
        valid_specimen_data["version"] = 1.2
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_VERSION.value]

    def test_alias_type_not_resolved(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test aliases are not accepted by the validator."""
        valid_specimen_data["type"] = "LC"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_SPECIMEN_TYPE.value]
        assert result.errors[0].message == (
            "type must be one of CULTURE, SPAWN, SUBSTRATE, FRUITING, HARVEST, got 'LC'"
        )

    @pytest.mark.parametrize("species", ["", "   ", 42])
    def test_blank_species(self, valid_specimen_data: dict[str, Any], species: Any) -> None:
        """Test species must be a non-blank string."""
        valid_specimen_data["species"] = species
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.REQUIRED_FIELD.value]


class TestIdModes:
    """Tests for selectable id validation."""

    def test_ulid_mode(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test ULID ids pass only in ULID mode."""
        valid_specimen_data["id"] = "wemush:01ARZ3NDEKTSV4RRFFQ69G5FAV"
        assert validate_specimen(valid_specimen_data, ValidationOptions(id_mode="ulid")).valid
        assert not validate_specimen(valid_specimen_data).valid

    def test_uuid_mode(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test UUID ids pass in UUID mode."""
        valid_specimen_data["id"] = "wemush:550e8400-e29b-41d4-a716-446655440000"
        assert validate_specimen(valid_specimen_data, ValidationOptions(id_mode="uuid")).valid

    def test_any_mode(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test any mode still requires the prefix."""
        valid_specimen_data["id"] = "wemush:Batch 7 / Jar 3"
        assert validate_specimen(valid_specimen_data, ValidationOptions(id_mode="any")).valid
        valid_specimen_data["id"] = "batch7"
        assert not validate_specimen(valid_specimen_data, ValidationOptions(id_mode="any")).valid

    def test_custom_validator_overrides_mode(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a custom predicate replaces the pattern check."""
        valid_specimen_data["id"] = "LAB-0001"
        options = ValidationOptions(custom_id_validator=lambda value: value.startswith("LAB-"))
        assert validate_specimen(valid_specimen_data, options).valid

        valid_specimen_data["id"] = "wemush:abc123"
        result = validate_specimen(valid_specimen_data, options)
        assert codes(result.errors) == [WolsErrorCode.INVALID_ID_FORMAT.value]
        assert "custom validation" in result.errors[0].message

    def test_unknown_mode_rejected_by_options(self) -> None:
        """Test an unknown id mode is rejected when the options are built."""
        with pytest.raises(ValueError, match="Unknown id mode: base64"):
            ValidationOptions(id_mode="base64")  # type: ignore[arg-type]

    def test_reassigned_unknown_mode_reported(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test validation reports, rather than raises, a mode set after construction."""
        options = ValidationOptions()
        options.id_mode = "base64"  # type: ignore[assignment]

        result = validate_specimen(valid_specimen_data, options)

        assert codes(result.errors) == [WolsErrorCode.INVALID_ID_FORMAT.value]
        assert "unknown id mode 'base64'" in result.errors[0].message


class TestOptionalFields:
    """Tests for stage and created, in strict and lenient levels."""

    def test_valid_optional_fields(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test valid optional fields pass."""
        valid_specimen_data.update({"stage": "COLONIZATION", "created": "2024-01-15T10:30:00Z"})
        assert validate_specimen(valid_specimen_data).valid

    def test_unknown_stage_strict(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test an unknown stage is an error in strict mode."""
        valid_specimen_data["stage"] = "SPROUTING"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == ["INVALID_GROWTH_STAGE"]

    def test_unknown_stage_lenient(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test an unknown stage is a warning in lenient mode."""
        valid_specimen_data["stage"] = "SPROUTING"
        result = validate_specimen(valid_specimen_data, ValidationOptions(level="lenient"))
        assert result.valid
        assert codes(result.warnings) == ["UNKNOWN_GROWTH_STAGE"]
        assert result.warnings[0].severity == Severity.WARNING
        assert result.warnings[0].suggestion == "Use one of: INOCULATION, COLONIZATION, FRUITING, HARVEST"

    def test_bad_created_strict(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a date-only created is an error in strict mode."""
        valid_specimen_data["created"] = "2024-01-15"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_DATE_FORMAT.value]

    def test_bad_created_lenient(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a malformed created is a warning in lenient mode."""
        valid_specimen_data["created"] = "Jan 15 2024"
        result = validate_specimen(valid_specimen_data, ValidationOptions(level="lenient"))
        assert result.valid
        assert codes(result.warnings) == [WolsErrorCode.INVALID_DATE_FORMAT.value]
        assert result.warnings[0].suggestion == "Use format: YYYY-MM-DDTHH:mm:ssZ"

    def test_non_string_created_always_error(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a numeric created is an error even in lenient mode."""
        valid_specimen_data["created"] = 1705314600
        result = validate_specimen(valid_specimen_data, ValidationOptions(level="lenient"))
        assert not result.valid

    def test_null_optional_fields_ignored(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test explicit nulls count as absent for optional fields."""
        valid_specimen_data.update({"stage": None, "created": None, "strain": None})
        assert validate_specimen(valid_specimen_data).valid

    def test_opaque_fields_not_checked(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test custom and signature are carried without checks."""
        valid_specimen_data.update({"custom": {"anything": [1, 2, 3]}, "signature": "sig", "_meta": {"x": 1}})
        result = validate_specimen(valid_specimen_data)
        assert result.valid
        assert result.warnings == []


class TestStrainValidation:
    """Tests for the strain sub-record."""

    def test_full_strain(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a complete strain passes."""
        valid_specimen_data["strain"] = {
            "name": "Blue Oyster",
            "generation": "F2",
            "clonalGeneration": 3,
            "lineage": "wemush:parent1",
            "source": "tissue",
        }
        assert validate_specimen(valid_specimen_data).valid

    def test_strain_not_object(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test a string strain is rejected (shorthand is only for creation)."""
        valid_specimen_data["strain"] = "Blue Oyster"
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_FORMAT.value]
        assert result.errors[0].message == "strain must be an object"

    def test_strain_missing_name(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test strain.name is required."""
        valid_specimen_data["strain"] = {"generation": "F1"}
        result = validate_specimen(valid_specimen_data)
        assert [issue.path for issue in result.errors] == ["strain.name"]
        assert codes(result.errors) == [WolsErrorCode.REQUIRED_FIELD.value]

    @pytest.mark.parametrize("generation", ["P", "F1", "F12"])
    def test_valid_generation(self, valid_specimen_data: dict[str, Any], generation: str) -> None:
        """Test parental and filial notation pass."""
        valid_specimen_data["strain"] = {"name": "Golden", "generation": generation}
        assert validate_specimen(valid_specimen_data).valid

    @pytest.mark.parametrize("generation", ["G1", "1", "f1", "P1", "", None])
    def test_invalid_generation(self, valid_specimen_data: dict[str, Any], generation: Any) -> None:
        """Test other notations fail record validation."""
        valid_specimen_data["strain"] = {"name": "Golden", "generation": generation}
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_GENERATION.value]
        assert result.errors[0].path == "strain.generation"

    @pytest.mark.parametrize("clonal", [0, -1, 1.5, "2", True])
    def test_invalid_clonal_generation(self, valid_specimen_data: dict[str, Any], clonal: Any) -> None:
        """Test clonalGeneration must be a positive integer."""
        valid_specimen_data["strain"] = {"name": "Golden", "clonalGeneration": clonal}
        result = validate_specimen(valid_specimen_data)
        assert [issue.path for issue in result.errors] == ["strain.clonalGeneration"]

    def test_non_string_lineage_and_source(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test lineage and source must be strings when present."""
        valid_specimen_data["strain"] = {"name": "Golden", "source": 1, "lineage": ["a"]}
        result = validate_specimen(valid_specimen_data)
        assert [issue.path for issue in result.errors] == ["strain.source", "strain.lineage"]


class TestUnknownFields:
    """Tests for unknown top-level fields."""

    def test_unknown_field_warning(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test unknown fields produce warnings but stay valid."""
        valid_specimen_data["color"] = "blue"
        result = validate_specimen(valid_specimen_data)
        assert result.valid
        assert codes(result.warnings) == ["UNKNOWN_FIELD"]
        assert result.warnings[0].path == "color"
        assert result.warnings[0].message == "Unknown field 'color'"
        assert result.warnings[0].suggestion == "Unknown fields should be placed in the custom object"

    def test_unknown_fields_in_key_order(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test warnings follow key order."""
        valid_specimen_data["zeta"] = 1
        valid_specimen_data["alpha"] = 2
        result = validate_specimen(valid_specimen_data)
        assert [issue.path for issue in result.warnings] == ["zeta", "alpha"]

    def test_allow_unknown_fields(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test unknown-field warnings can be suppressed."""
        valid_specimen_data["color"] = "blue"
        result = validate_specimen(valid_specimen_data, ValidationOptions(allow_unknown_fields=True))
        assert result.warnings == []


class TestStrictPatternMatching:
    """Tests that patterns match the whole value with ASCII digits only."""

    @pytest.mark.parametrize(
        ("field", "value", "code"),
        [
            ("id", "wemush:abc123\n", WolsErrorCode.INVALID_ID_FORMAT),
            ("id", "wemush:abc١٢٣", WolsErrorCode.INVALID_ID_FORMAT),
            ("version", "1.2.0\n", WolsErrorCode.INVALID_VERSION),
            ("version", "١.٢.٠", WolsErrorCode.INVALID_VERSION),
            ("created", "2024-01-15T10:30:00Z\n", WolsErrorCode.INVALID_DATE_FORMAT),
            ("created", "٢٠٢٤-01-15T10:30:00Z", WolsErrorCode.INVALID_DATE_FORMAT),
        ],
    )
    def test_top_level_field_rejected(
        self, valid_specimen_data: dict[str, Any], field: str, value: str, code: WolsErrorCode
    ) -> None:
        """Test trailing newlines and non-ASCII digits are rejected."""
        valid_specimen_data[field] = value
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [code.value]

    @pytest.mark.parametrize("generation", ["F1\n", "F١", "P\n"])
    def test_strain_generation_rejected(self, valid_specimen_data: dict[str, Any], generation: str) -> None:
        """Test strain generations must match exactly."""
        valid_specimen_data["strain"] = {"name": "Blue Oyster", "generation": generation}
        result = validate_specimen(valid_specimen_data)
        assert codes(result.errors) == [WolsErrorCode.INVALID_GENERATION.value]

    def test_ulid_mode_rejects_case_folded_lookalike(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test case-insensitive ULID matching stays within ASCII."""
        # U+212A KELVIN SIGN case-folds to "k" under Unicode matching
        valid_specimen_data["id"] = "wemush:01ARZ3NDE\u212aTSV4RRFFQ69G5FAV"
        result = validate_specimen(valid_specimen_data, ValidationOptions(id_mode="ulid"))
        assert codes(result.errors) == [WolsErrorCode.INVALID_ID_FORMAT.value]

    def test_ulid_mode_accepts_lowercase(self, valid_specimen_data: dict[str, Any]) -> None:
        """Test ASCII case folding still applies to ULIDs."""
        valid_specimen_data["id"] = "wemush:01arz3ndektsv4rrffq69g5fav"
        assert validate_specimen(valid_specimen_data, ValidationOptions(id_mode="ulid")).valid
