"""Instrument versions — a claim tree plus the history that produced it.

Every event that changes the tree mints a new InstrumentVersion keyed by
the content hash of the reduced tree; earlier versions stay valid. The
retained history lets any version be re-derived from its inception tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow, localcontext
from typing import Any, final

from contingent.claims.claim import Claim, is_zero
from contingent.core.errors import (
    EvaluationError,
    FieldViolation,
    LifecycleError,
    ReplayMismatchError,
    ValidationError,
)
from contingent.core.numeric import CONTINGENT_DECIMAL_CONTEXT, PositiveDecimal
from contingent.core.result import Err, Ok
from contingent.core.serialization import content_hash
from contingent.core.types import UtcDatetime
from contingent.infra.config import LifecycleConfig
from contingent.lifecycle.effect import AssetQuantity, Effect, assemble_effect
from contingent.lifecycle.engine import elect, lifecycle
from contingent.lifecycle.events import Election, Event, LifecycleResult, TimeEvent
from contingent.oracle.protocols import ObserveFn, Oracle

type VersionError = LifecycleError | ReplayMismatchError


@final
@dataclass(frozen=True, slots=True)
class InstrumentVersion:
    """One immutable version of an instrument.

    ``history`` holds every event applied since inception, in order;
    replaying it over ``inception_claim`` reproduces ``claim``.
    """

    instrument_id: str
    version: str
    claim: Claim
    acquisition_time: Any
    history: tuple[Event, ...]
    inception_claim: Claim

    @property
    def elections(self) -> tuple[Election[Any], ...]:
        return tuple(e for e in self.history if isinstance(e, Election))

    @property
    def last_event_time(self) -> Any:
        return self.history[-1].time if self.history else self.acquisition_time


def _validation_error(source: str, violations: list[FieldViolation]) -> ValidationError:
    return ValidationError(
        message=f"{source} failed: {len(violations)} field error(s)",
        code="VALIDATION_ERROR",
        timestamp=UtcDatetime.now(),
        source=f"lifecycle.version.{source}",
        fields=tuple(violations),
    )


def version_id(claim: Claim) -> Ok[str] | Err[ValidationError]:
    """Content hash of ``claim``: the version key of the instrument it backs."""
    match content_hash(claim):
        case Err(reason):
            return Err(_validation_error("version_id", [FieldViolation(
                path="claim", constraint="must have a canonical encoding",
                actual_value=reason,
            )]))
        case Ok(h):
            return Ok(h)


def create_instrument(
    instrument_id: str, claim: Claim, acquisition_time: Any,
) -> Ok[InstrumentVersion] | Err[ValidationError]:
    """First version of an instrument, acquired at ``acquisition_time``."""
    violations: list[FieldViolation] = []
    if not instrument_id:
        violations.append(FieldViolation(
            path="instrument_id", constraint="non-empty", actual_value=repr(instrument_id),
        ))
    if is_zero(claim):
        violations.append(FieldViolation(
            path="claim", constraint="must not be Zero", actual_value="Zero",
        ))
    if violations:
        return Err(_validation_error("create_instrument", violations))
    match version_id(claim):
        case Err() as e:
            return e
        case Ok(vid):
            pass
    return Ok(InstrumentVersion(
        instrument_id=instrument_id,
        version=vid,
        claim=claim,
        acquisition_time=acquisition_time,
        history=(),
        inception_claim=claim,
    ))


def replay(
    version: InstrumentVersion, oracle: Oracle | ObserveFn,
) -> Ok[LifecycleResult] | Err[VersionError]:
    """Fast-forward the inception tree over the retained history.

    Err(ReplayMismatchError) if the result is not the stored tree.
    """
    match lifecycle(version.inception_claim, oracle, version.history):
        case Err() as e:
            return e
        case Ok(result):
            pass
    if result.remaining != version.claim:
        actual = "discharged"
        if result.remaining is not None:
            actual = version_id(result.remaining).unwrap_or("unencodable")
        return Err(ReplayMismatchError(
            message=(
                f"Replaying {len(version.history)} event(s) of {version.instrument_id} "
                f"does not reproduce version {version.version}"
            ),
            code="REPLAY_MISMATCH",
            timestamp=UtcDatetime.now(),
            source="lifecycle.version.replay",
            expected=version.version,
            actual=actual,
        ))
    return Ok(result)


# ---------------------------------------------------------------------------
# Elections
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ElectionRequest:
    """An authorized election against one version of an instrument.

    ``amount`` is the number of units of the instrument the elector holds;
    realized quantities are per unit and are multiplied by it.
    """

    elector: str
    counterparty: str
    elector_is_owner: bool
    tag: str
    amount: PositiveDecimal
    time: Any

    @staticmethod
    def create(
        elector: str,
        counterparty: str,
        elector_is_owner: bool,
        tag: str,
        amount: Decimal,
        time: Any,
    ) -> Ok[ElectionRequest] | Err[ValidationError]:
        violations: list[FieldViolation] = []
        if not elector:
            violations.append(FieldViolation(
                path="elector", constraint="non-empty", actual_value=repr(elector),
            ))
        if not counterparty:
            violations.append(FieldViolation(
                path="counterparty", constraint="non-empty", actual_value=repr(counterparty),
            ))
        if elector and elector == counterparty:
            violations.append(FieldViolation(
                path="counterparty", constraint="must differ from elector",
                actual_value=repr(counterparty),
            ))
        if not tag:
            violations.append(FieldViolation(
                path="tag", constraint="non-empty", actual_value=repr(tag),
            ))
        if time is None:
            violations.append(FieldViolation(
                path="time", constraint="required", actual_value="None",
            ))
        qty: PositiveDecimal | None = None
        match PositiveDecimal.parse(amount):
            case Err(reason):
                violations.append(FieldViolation(
                    path="amount", constraint=reason, actual_value=repr(amount),
                ))
            case Ok(q):
                qty = q
        if violations or qty is None:
            return Err(_validation_error("ElectionRequest.create", violations))
        return Ok(ElectionRequest(
            elector=elector,
            counterparty=counterparty,
            elector_is_owner=elector_is_owner,
            tag=tag,
            amount=qty,
            time=time,
        ))

    def to_election(self) -> Election[Any]:
        return Election(time=self.time, tag=self.tag, elector_is_owner=self.elector_is_owner)


@final
@dataclass(frozen=True, slots=True)
class ElectionOutcome:
    """The effect of an election and the version it produced, if any."""

    effect: Effect
    version: InstrumentVersion | None


@final
@dataclass(frozen=True, slots=True)
class TimeEventOutcome:
    """effect is None when the event changed nothing."""

    effect: Effect | None
    version: InstrumentVersion | None


def _check_not_before_history(
    version: InstrumentVersion, time: Any, source: str,
) -> Ok[None] | Err[ValidationError]:
    if time < version.last_event_time:
        return Err(_validation_error(source, [FieldViolation(
            path="time",
            constraint=f"must be >= {version.last_event_time!s}",
            actual_value=str(time),
        )]))
    return Ok(None)


def _scale_effect(effect: Effect, units: Decimal) -> Ok[Effect] | Err[EvaluationError]:
    if units == 1:
        return Ok(effect)

    def scale(qs: tuple[AssetQuantity[Any], ...]) -> tuple[AssetQuantity[Any], ...]:
        return tuple(AssetQuantity(asset=q.asset, amount=q.amount * units) for q in qs)

    try:
        with localcontext(CONTINGENT_DECIMAL_CONTEXT):
            return Ok(Effect(
                instrument_id=effect.instrument_id,
                target_instrument_version=effect.target_instrument_version,
                produced_instrument_version=effect.produced_instrument_version,
                consumed=scale(effect.consumed),
                produced=scale(effect.produced),
                settlement_time=effect.settlement_time,
            ))
    except (InvalidOperation, Overflow) as exc:
        return Err(EvaluationError(
            message=f"Cannot scale effect by {units}: {type(exc).__name__}",
            code="EVALUATION_ERROR",
            timestamp=UtcDatetime.now(),
            source="lifecycle.version._scale_effect",
            expression=f"quantity * {units}",
        ))


def _advance(
    version: InstrumentVersion, event: Event, result: LifecycleResult,
) -> Ok[InstrumentVersion | None] | Err[ValidationError]:
    """The version minted by ``result``, or None if nothing is left to track."""
    remaining = result.remaining
    if remaining is None or (remaining == version.claim and not result.pending):
        return Ok(None)
    match version_id(remaining):
        case Err() as e:
            return e
        case Ok(vid):
            pass
    return Ok(InstrumentVersion(
        instrument_id=version.instrument_id,
        version=vid,
        claim=remaining,
        acquisition_time=version.acquisition_time,
        history=(*version.history, event),
        inception_claim=version.inception_claim,
    ))


def apply_election(
    version: InstrumentVersion,
    request: ElectionRequest,
    oracle: Oracle | ObserveFn,
    config: LifecycleConfig | None = None,
) -> Ok[ElectionOutcome] | Err[VersionError]:
    """Apply one election to ``version``.

    A new version is minted when the reduced tree is non-trivial and
    differs from the input; the election is appended to its history.
    """
    cfg = config if config is not None else LifecycleConfig()
    if cfg.verify_replay:
        match replay(version, oracle):
            case Err() as e:
                return e
    match _check_not_before_history(version, request.time, "apply_election"):
        case Err() as e:
            return e

    election = request.to_election()
    match elect(version.claim, oracle, (election,), cfg):
        case Err() as e:
            return e
        case Ok(result):
            pass
    match _advance(version, election, result):
        case Err() as e:
            return e
        case Ok(new_version):
            pass
    effect = assemble_effect(
        instrument_id=version.instrument_id,
        target_version=version.version,
        produced_version=new_version.version if new_version is not None else None,
        result=result,
        settlement_time=request.time,
        elector_is_owner=request.elector_is_owner,
    )
    match _scale_effect(effect, request.amount.value):
        case Err() as e:
            return e
        case Ok(scaled):
            return Ok(ElectionOutcome(effect=scaled, version=new_version))


def apply_time_event(
    version: InstrumentVersion,
    oracle: Oracle | ObserveFn,
    time: Any,
    config: LifecycleConfig | None = None,
) -> Ok[TimeEventOutcome] | Err[VersionError]:
    """Advance ``version`` to ``time`` with no election (coupons, expiry)."""
    cfg = config if config is not None else LifecycleConfig()
    if cfg.verify_replay:
        match replay(version, oracle):
            case Err() as e:
                return e
    match _check_not_before_history(version, time, "apply_time_event"):
        case Err() as e:
            return e

    event = TimeEvent(time=time)
    match lifecycle(version.claim, oracle, (event,)):
        case Err() as e:
            return e
        case Ok(result):
            pass
    if result.remaining == version.claim and not result.pending:
        return Ok(TimeEventOutcome(effect=None, version=None))
    match _advance(version, event, result):
        case Err() as e:
            return e
        case Ok(new_version):
            pass
    effect = assemble_effect(
        instrument_id=version.instrument_id,
        target_version=version.version,
        produced_version=new_version.version if new_version is not None else None,
        result=result,
        settlement_time=time,
    )
    return Ok(TimeEventOutcome(effect=effect, version=new_version))
