"""contingent.oracle — market observation sources."""

from contingent.oracle.fixings import FixingTable as FixingTable
from contingent.oracle.protocols import EmptyOracle as EmptyOracle
from contingent.oracle.protocols import FunctionOracle as FunctionOracle
from contingent.oracle.protocols import ObserveFn as ObserveFn
from contingent.oracle.protocols import Oracle as Oracle
from contingent.oracle.protocols import as_oracle as as_oracle
from contingent.oracle.protocols import missing_observation as missing_observation
