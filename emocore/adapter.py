"""
Conversion between samples and health store records.

The store's vocabulary may be newer than ours. Reading a record back is
therefore strict: any code we do not recognize fails the conversion rather
than being silently dropped.
"""

from .errors import UnrecognizedExternalField
from .models import STATE_OF_MIND_TYPE, HealthRecord, StateOfMind
from .valence import ValenceClassification, classify, is_valid_valence
from .vocabulary import Association, Kind, Label


def to_external(sample: StateOfMind) -> HealthRecord:
    """Build the store record for ``sample``."""
    return HealthRecord(
        uuid=sample.id,
        start_date=sample.date,
        kind=int(sample.kind),
        valence=sample.valence,
        valence_classification=int(sample.valence_classification),
        labels=[int(label) for label in sample.labels],
        associations=[int(association) for association in sample.associations],
    )


def from_external(record: HealthRecord) -> StateOfMind:
    """
    Rebuild a sample from a store record.

    Raises:
        UnrecognizedExternalField: If the record holds a code or value this
            package cannot represent
    """
    if record.record_type != STATE_OF_MIND_TYPE:
        raise UnrecognizedExternalField("record_type", record.record_type)

    kind = Kind.from_code(record.kind)
    if kind is None:
        raise UnrecognizedExternalField("kind", record.kind)

    if not is_valid_valence(record.valence):
        raise UnrecognizedExternalField("valence", record.valence)

    classification = ValenceClassification.from_code(record.valence_classification)
    if classification is None or classification is not classify(record.valence):
        raise UnrecognizedExternalField(
            "valence_classification", record.valence_classification
        )

    labels = []
    for code in record.labels:
        label = Label.from_code(code)
        if label is None:
            raise UnrecognizedExternalField("labels", code)
        labels.append(label)

    associations = []
    for code in record.associations:
        association = Association.from_code(code)
        if association is None:
            raise UnrecognizedExternalField("associations", code)
        associations.append(association)

    return StateOfMind(
        id=record.uuid,
        date=record.start_date,
        kind=kind,
        valence=record.valence,
        labels=tuple(labels),
        associations=tuple(associations),
    )
