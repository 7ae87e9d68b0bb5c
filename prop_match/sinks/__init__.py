"""Output sinks for geocoding plans and analyses."""

from prop_match.sinks.console import ConsoleSink
from prop_match.sinks.json_file import JsonFileSink
from prop_match.sinks.serialization import serialize_value, to_dict

__all__ = ["ConsoleSink", "JsonFileSink", "serialize_value", "to_dict"]
