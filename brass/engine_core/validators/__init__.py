"""
Per-action validators and executors.

Validators never mutate. Executors re-run their validator and only
touch the state once every check has passed.
"""

from .build import validate_build, execute_build
from .links import validate_network, execute_network, link_cost
from .sell import validate_sell, execute_sell
from .develop import validate_develop, execute_develop
from .loan import validate_loan, execute_loan
from .scout import validate_scout, execute_scout
from .passing import validate_pass, execute_pass

__all__ = [
    "validate_build", "execute_build",
    "validate_network", "execute_network", "link_cost",
    "validate_sell", "execute_sell",
    "validate_develop", "execute_develop",
    "validate_loan", "execute_loan",
    "validate_scout", "execute_scout",
    "validate_pass", "execute_pass",
]
