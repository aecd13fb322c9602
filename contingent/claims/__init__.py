"""contingent.claims — claim algebra, observations and predicates."""

# Observation expressions
from contingent.claims.observation import Arithmetic as Arithmetic
from contingent.claims.observation import ArithmeticOp as ArithmeticOp
from contingent.claims.observation import Const as Const
from contingent.claims.observation import Observation as Observation
from contingent.claims.observation import Observe as Observe
from contingent.claims.observation import add as add
from contingent.claims.observation import const as const
from contingent.claims.observation import div as div
from contingent.claims.observation import evaluate as evaluate
from contingent.claims.observation import map_observation as map_observation
from contingent.claims.observation import mul as mul
from contingent.claims.observation import sub as sub

# Predicates
from contingent.claims.inequality import Inequality as Inequality
from contingent.claims.inequality import Lte as Lte
from contingent.claims.inequality import TimeGte as TimeGte
from contingent.claims.inequality import TimeLte as TimeLte
from contingent.claims.inequality import compare as compare
from contingent.claims.inequality import map_inequality as map_inequality

# Claim nodes and smart constructors
from contingent.claims.claim import ZERO as ZERO
from contingent.claims.claim import Alternative as Alternative
from contingent.claims.claim import And as And
from contingent.claims.claim import Anytime as Anytime
from contingent.claims.claim import Claim as Claim
from contingent.claims.claim import Cond as Cond
from contingent.claims.claim import Give as Give
from contingent.claims.claim import One as One
from contingent.claims.claim import Or as Or
from contingent.claims.claim import Scale as Scale
from contingent.claims.claim import Until as Until
from contingent.claims.claim import When as When
from contingent.claims.claim import Zero as Zero
from contingent.claims.claim import all_of as all_of
from contingent.claims.claim import and_ as and_
from contingent.claims.claim import any_of as any_of
from contingent.claims.claim import is_zero as is_zero
from contingent.claims.claim import or_ as or_

# Traversal
from contingent.claims.functor import ParamMapping as ParamMapping
from contingent.claims.functor import fold_claim as fold_claim
from contingent.claims.functor import identity_mapping as identity_mapping
from contingent.claims.functor import map_children as map_children
from contingent.claims.functor import map_params as map_params

# Queries
from contingent.claims.util import assets as assets
from contingent.claims.util import election_tags as election_tags
from contingent.claims.util import expiry as expiry
from contingent.claims.util import fixing_dates as fixing_dates
from contingent.claims.util import observables as observables
from contingent.claims.util import render as render
from contingent.claims.util import size as size

# Builders
from contingent.claims.builders import american as american
from contingent.claims.builders import at as at
from contingent.claims.builders import bermudan as bermudan
from contingent.claims.builders import callable_bond as callable_bond
from contingent.claims.builders import european as european
from contingent.claims.builders import european_cash as european_cash
from contingent.claims.builders import fixed as fixed
from contingent.claims.builders import floating as floating
from contingent.claims.builders import pay as pay
from contingent.claims.builders import periodic_dates as periodic_dates
from contingent.claims.builders import zcb as zcb
