"""metalwatch: daily gold and silver price tracker."""

__version__ = "0.1.0"
