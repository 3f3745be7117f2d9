import logging

from cineverse.domain.exceptions import UpstreamUnavailableError
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter, describe_failure


def test_describe_failure_prefers_domain_detail():
    exc = UpstreamUnavailableError("Movie metadata service unavailable", detail="TMDB returned 502")

    assert describe_failure(exc) == "UpstreamUnavailableError: TMDB returned 502"
    assert describe_failure(UpstreamUnavailableError("Movie metadata service unavailable")) == (
        "UpstreamUnavailableError: Movie metadata service unavailable"
    )
    assert describe_failure(ValueError()) == "ValueError"


def test_source_degraded_logs_a_warning_for_the_caller(caplog):
    adapter = StdLoggerAdapter("cineverse.tests")

    with caplog.at_level(logging.WARNING, logger="cineverse.tests"):
        adapter.source_degraded("most searched", "details:2", KeyError("results"))

    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "most searched: details:2 skipped (KeyError: 'results')"
    assert record.funcName == "test_source_degraded_logs_a_warning_for_the_caller"


def test_info_is_attributed_to_the_caller(caplog):
    adapter = StdLoggerAdapter("cineverse.tests")

    with caplog.at_level(logging.INFO, logger="cineverse.tests"):
        adapter.info("Synced 20 movies")

    [record] = caplog.records
    assert record.getMessage() == "Synced 20 movies"
    assert record.funcName == "test_info_is_attributed_to_the_caller"
