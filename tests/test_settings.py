import pytest

from pm_app.core.errors import ConfigurationError
from pm_app.core.settings import Settings, load_settings


def test_section_wins_over_top_level_and_env():
    secrets = {
        "jira": {"JIRA_SERVER": "https://a.atlassian.net/", "JIRA_EMAIL": "a@x.io", "JIRA_TOKEN": "t1"},
        "JIRA_SERVER": "https://b.atlassian.net",
    }
    env = {"JIRA_SERVER": "https://c.atlassian.net", "JIRA_API_TOKEN": "env-token"}
    settings = load_settings(secrets, env)
    assert settings.jira.server == "https://a.atlassian.net"
    assert settings.jira.email == "a@x.io"
    assert settings.jira.token == "t1"
    assert settings.jira.is_complete


def test_environment_fallback():
    env = {
        "JIRA_BASE_URL": "https://env.atlassian.net",
        "JIRA_EMAIL": "pm@x.io",
        "JIRA_API_TOKEN": "tok",
        "SLACK_BOT_TOKEN": "xoxb-1",
        "ANTHROPIC_API_KEY": "sk-ant",
        "DASHBOARD_TIMEZONE": "America/Santiago",
        "AVG_OPEN_DATED_ONLY": "true",
        "STALE_DAYS": "7",
        "JIRA_PROJECT": "ARC",
    }
    settings = load_settings({}, env)
    assert settings.jira.server == "https://env.atlassian.net"
    assert settings.slack.bot_token == "xoxb-1"
    assert settings.llm.api_key == "sk-ant"
    assert settings.analytics.timezone == "America/Santiago"
    assert settings.analytics.avg_open_dated_only is True
    assert settings.analytics.stale_days == 7
    assert settings.default_project == "ARC"


def test_defaults_and_slack_user_ids():
    settings = load_settings({"slack": {"user_ids": {"Alice": "U1"}}}, {})
    assert settings.slack.user_ids == {"Alice": "U1"}
    assert settings.slack.api_base == "https://slack.com/api"
    assert settings.analytics.timezone == "UTC"
    assert settings.analytics.avg_open_dated_only is False
    assert settings.analytics.stale_days == 4
    assert settings.default_project == "NTRVSTA"


@pytest.mark.parametrize(
    "section,message",
    [
        ("jira", "Jira credentials not configured"),
        ("slack", "Slack token not configured"),
        ("llm", "Anthropic API key not configured"),
    ],
)
def test_require_raises_configuration_error(section, message):
    with pytest.raises(ConfigurationError) as exc:
        getattr(Settings(), section).require()
    assert exc.value.message == message
    assert exc.value.http_status == 500
