import pytest

from deprecation_crawler.config import DEFAULT_OUTPUT, load_config
from deprecation_crawler.domain.errors import ConfigurationError

ENV = {"LIBRARIES_API_KEY": "lib-key", "GITHUB_TOKEN": "gh-token"}


def test_defaults():
    config = load_config([], ENV)

    assert config.api_key == "lib-key"
    assert config.github_token == "gh-token"
    assert (config.pages, config.per_page, config.concurrency) == (2, 20, 2)
    assert config.output == DEFAULT_OUTPUT
    assert config.platform == "npm"
    assert config.log_level == "INFO"


def test_flags_override_defaults():
    config = load_config(
        ["--pages", "60", "--per-page", "100", "--concurrency", "3", "--output", "out/deprecated.json",
         "--platform", "pypi", "--log-level", "DEBUG"],
        ENV,
    )

    assert (config.pages, config.per_page, config.concurrency) == (60, 100, 3)
    assert config.output == "out/deprecated.json"
    assert config.platform == "pypi"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("missing", ["LIBRARIES_API_KEY", "GITHUB_TOKEN"])
def test_missing_credentials_raise(missing):
    env = {k: v for k, v in ENV.items() if k != missing}

    with pytest.raises(ConfigurationError, match=missing):
        load_config([], env)


def test_empty_credential_counts_as_missing():
    with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
        load_config([], {**ENV, "GITHUB_TOKEN": ""})


@pytest.mark.parametrize("flag", ["--pages", "--per-page", "--concurrency"])
def test_non_positive_numbers_raise(flag):
    with pytest.raises(ConfigurationError, match=flag):
        load_config([flag, "0"], ENV)
