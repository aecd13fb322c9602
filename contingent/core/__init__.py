"""contingent.core — results, error values, and canonical encoding."""

from contingent.core.errors import (
    BusinessRuleViolationError as BusinessRuleViolationError,
)
from contingent.core.errors import (
    ConstructionError as ConstructionError,
)
from contingent.core.errors import (
    ContingentError as ContingentError,
)
from contingent.core.errors import (
    EvaluationError as EvaluationError,
)
from contingent.core.errors import (
    FieldViolation as FieldViolation,
)
from contingent.core.errors import (
    MissingObservationError as MissingObservationError,
)
from contingent.core.errors import (
    MultipleElectionsError as MultipleElectionsError,
)
from contingent.core.errors import (
    PersistenceError as PersistenceError,
)
from contingent.core.errors import (
    ReplayMismatchError as ReplayMismatchError,
)
from contingent.core.errors import (
    UnmatchedElectionTagError as UnmatchedElectionTagError,
)
from contingent.core.errors import (
    ValidationError as ValidationError,
)
from contingent.core.numeric import (
    CONTINGENT_DECIMAL_CONTEXT as CONTINGENT_DECIMAL_CONTEXT,
)
from contingent.core.numeric import (
    PositiveDecimal as PositiveDecimal,
)
from contingent.core.result import (
    Err as Err,
)
from contingent.core.result import (
    Ok as Ok,
)
from contingent.core.result import (
    Result as Result,
)
from contingent.core.result import (
    sequence as sequence,
)
from contingent.core.result import (
    traverse as traverse,
)
from contingent.core.result import (
    unwrap as unwrap,
)
from contingent.core.serialization import (
    canonical_bytes as canonical_bytes,
)
from contingent.core.serialization import (
    content_hash as content_hash,
)
from contingent.core.types import (
    FrozenMap as FrozenMap,
)
from contingent.core.types import (
    UtcDatetime as UtcDatetime,
)
