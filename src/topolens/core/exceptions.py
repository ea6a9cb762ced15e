"""
Exception hierarchy for topolens.

Empty results and search caps are not errors and never raise; everything
here aborts a single operation and leaves the loaded dataset and the
visible view at their last good state.
"""


class TopologyError(Exception):
    """Base class for all topolens errors."""


class DataFormatError(TopologyError):
    """The topology file is structurally invalid and cannot be loaded."""

    def __init__(self, reason: str, source: str = ""):
        self.reason = reason
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(f"Invalid topology data{where}: {reason}")


class NoDataLoadedError(TopologyError):
    """An operation needs a dataset but none has been loaded yet."""

    def __init__(self):
        super().__init__("No topology data loaded. Load a data file first.")


class InvalidQueryError(TopologyError):
    """A query parameter is missing or malformed."""


class SearchInProgressError(TopologyError):
    """A path search was started while another one is still pending."""

    def __init__(self):
        super().__init__("A path search is already running")
