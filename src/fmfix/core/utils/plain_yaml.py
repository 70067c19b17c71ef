"""PyYAML loader/dumper pair that keeps timestamps as plain strings"""

import yaml


TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
STR_TAG = "tag:yaml.org,2002:str"


def _without_timestamps(resolvers: dict) -> dict:
    return {
        first: [(tag, regexp) for tag, regexp in entries if tag != TIMESTAMP_TAG]
        for first, entries in resolvers.items()
    }


class PlainLoader(yaml.SafeLoader):
    """SafeLoader whose values stay within str/int/float/bool/None/list/dict."""


class PlainDumper(yaml.SafeDumper):
    """SafeDumper that writes date-like strings unquoted, mirroring PlainLoader."""


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    # multi-line text keeps the literal block form it is usually written in
    if "\n" in value:
        return dumper.represent_scalar(STR_TAG, value, style="|")
    return dumper.represent_str(value)


PlainLoader.yaml_implicit_resolvers = _without_timestamps(yaml.SafeLoader.yaml_implicit_resolvers)
PlainDumper.yaml_implicit_resolvers = _without_timestamps(yaml.SafeDumper.yaml_implicit_resolvers)
PlainDumper.add_representer(str, _represent_str)
