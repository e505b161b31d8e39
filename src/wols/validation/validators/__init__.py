"""Field validators for the validation framework.

This package provides validators for specific specimen fields:
- jsonld: "@context" and "@type" markers
- identity: Specimen id (selectable id modes) and semver version
- fields: Specimen type, species, growth stage, ISO 8601 timestamps
- strain: Nested strain object
"""

from wols.validation.validators.fields import (
    GrowthStageValidator,
    ISO8601Validator,
    NonEmptyStringValidator,
    SpecimenTypeValidator,
)
from wols.validation.validators.identity import SemverValidator, SpecimenIdValidator
from wols.validation.validators.jsonld import ConstantValidator
from wols.validation.validators.strain import StrainValidator

__all__ = [
    "ConstantValidator",
    "GrowthStageValidator",
    "ISO8601Validator",
    "NonEmptyStringValidator",
    "SemverValidator",
    "SpecimenIdValidator",
    "SpecimenTypeValidator",
    "StrainValidator",
]
