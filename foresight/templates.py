"""
Jinja2 templates for explanation sentences and alert messages.
"""

import datetime as dt

from jinja2 import Environment, Template

from foresight.exceptions import UnknownIdentifierError


def format_number(value: float | None, precision: int = 0) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.{precision}f}"


def format_percent(value: float | None, precision: int = 1) -> str:
    """Format a fraction as a percentage, e.g. 0.153 -> '15.3%'"""
    if value is None:
        return "N/A"
    return f"{value * 100:.{precision}f}%"


def format_date(value: dt.date | str, fmt: str = "%b %d, %Y") -> str:
    if isinstance(value, str):
        value = dt.date.fromisoformat(value)
    return value.strftime(fmt)


EXPLANATION_TEMPLATES = {
    "revenue_growth": (
        "Revenue forecast shows {{ change | format_percent }} growth over the next week "
        "compared with recent daily revenue"
    ),
    "revenue_decline": (
        "Revenue forecast points to a softer week ahead, {{ change | abs | format_percent }} "
        "below recent daily revenue, so keep an eye on demand"
    ),
    "revenue_stable": "Revenue forecast shows a stable pattern close to recent daily revenue",
    "seasonality": "Weekly seasonality patterns detected in revenue data",
    "cfsi": "Cash flow stability index is {{ value | format_number }} out of 100, rated {{ tier }}",
    "churn": "Churn risk is {{ tier }} at {{ value | format_percent }} based on engagement and order patterns",
    "anticipated_need": (
        "Next order window expected from {{ start | format_date }} to {{ end | format_date }} "
        "with {{ confidence | format_percent(0) }} confidence"
    ),
    "fallback": "Forecast uses the EWMA model alone because the ensemble could not be fitted",
    "preferences": "Alert and contact preferences can be updated at any time",
    "closing": "These projections help long-term planning and a transparent customer relationship",
}

ALERT_TEMPLATES = {
    "forecast_downside": (
        "Alert: {{ rule.name }} - forecast average {{ forecast_average | format_number }} is "
        "{{ drop | format_percent }} below recent daily revenue of {{ recent_average | format_number }}"
    ),
    "cfsi_low": "Alert: {{ rule.name }} - CFSI is {{ value | format_number(1) }}, below {{ rule.threshold | format_number }}",
    "cfsi_critical": (
        "Alert: {{ rule.name }} - CFSI is {{ value | format_number(1) }}, below {{ rule.threshold | format_number }}"
    ),
    "churn_risk_high": (
        "Alert: {{ rule.name }} - churn risk is {{ value | format_percent }}, "
        "above {{ rule.threshold | format_percent(0) }}"
    ),
    "anticipated_need_urgent": (
        "Alert: {{ rule.name }} - order window "
        "{% if days > 0 %}opens in {{ days }} days{% else %}is open now{% endif %} "
        "with {{ confidence | format_percent(0) }} confidence"
    ),
    "revenue_volatility_high": (
        "Alert: {{ rule.name }} - forecast coefficient of variation is {{ cv | format_percent }}"
    ),
    "sla_performance_low": (
        "Alert: {{ rule.name }} - SLA performance is {{ value | format_percent }}, "
        "below {{ rule.threshold | format_percent(0) }}"
    ),
}

TEMPLATE_GROUPS = {"explanation": EXPLANATION_TEMPLATES, "alert": ALERT_TEMPLATES}


def get_template_env() -> Environment:
    """
    Get Jinja2 environment with custom filters.

    Returns:
        Configured Jinja2 environment
    """
    env = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)  # noqa
    env.filters["format_number"] = format_number
    env.filters["format_percent"] = format_percent
    env.filters["format_date"] = format_date
    env.filters["abs"] = abs
    return env


def get_template(group: str, key: str) -> Template:
    """
    Get a template by group ('explanation' or 'alert') and key.

    Raises:
        UnknownIdentifierError: If no such template exists
    """
    templates = TEMPLATE_GROUPS.get(group)
    if templates is None or key not in templates:
        raise UnknownIdentifierError(f"{group}.{key}", "template")
    return get_template_env().from_string(templates[key])


def render_text(group: str, key: str, context: dict) -> str:
    """Render a template with the given context, collapsing whitespace."""
    return " ".join(get_template(group, key).render(**context).split())
