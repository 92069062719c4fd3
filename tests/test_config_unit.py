from __future__ import annotations

from datetime import timezone

import pytest

from diratlas.config import ScanConfig, resolve_timezone
from diratlas.errors import InvalidArgumentError


def test_from_options_keeps_order_and_skips_blank_entries():
    cfg = ScanConfig.from_options({
        "directoryJsonValue": [{"directory": "/b"}, {"directory": "  "}, {"directory": "/a"}],
    })
    assert cfg.directories == ("/b", "/a")
    assert cfg.checksum_algorithm == "sha256"
    assert cfg.sample_limit == 1024
    assert cfg.non_printable_threshold == 0.05


def test_from_options_timezone_and_algorithm():
    cfg = ScanConfig.from_options({
        "directoryJsonValue": [{"directory": "/data"}],
        "timezone": "UTC",
        "checksumAlgorithm": "SHA-512",
    })
    assert cfg.timezone is timezone.utc
    assert cfg.checksum_algorithm == "SHA-512"


@pytest.mark.parametrize("options", [
    {},
    {"directoryJsonValue": []},
    {"directoryJsonValue": [{"directory": ""}]},
    {"directoryJsonValue": "not-a-list"},
    {"directoryJsonValue": ["/plain/string"]},
])
def test_from_options_rejects_bad_input(options):
    with pytest.raises(InvalidArgumentError):
        ScanConfig.from_options(options)


def test_from_json():
    cfg = ScanConfig.from_json('{"directoryJsonValue":[{"directory":"/x"}],"fileContentColumn":0}')
    assert cfg.directories == ("/x",)
    with pytest.raises(ValueError):
        ScanConfig.from_json("{not json")


def test_resolve_timezone():
    assert resolve_timezone(None) is None
    assert resolve_timezone("local") is None
    assert resolve_timezone("utc") is timezone.utc
    with pytest.raises(InvalidArgumentError):
        resolve_timezone("Nowhere/Atlantis")
