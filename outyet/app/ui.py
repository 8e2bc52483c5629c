from jinja2 import Environment, select_autoescape

_STYLE = """<style>
body{font-family:sans-serif;margin:24px;text-align:center}
.answer{font-size:6em;font-weight:bold;margin:24px 0}
.yes{color:#2a7}.no{color:#a33}
.card{display:inline-block;border:1px solid #ddd;border-radius:10px;padding:12px 24px;margin-top:24px}
.meta{color:#666;font-size:12px}
.err{background:#ffebe6;border-radius:10px;padding:12px}
</style>"""

_FORM = """<form class="card" action="/submit" method="post">
  Current Zip code: <input type="text" name="zip">
  <input type="submit" value="Find Weather">
</form>"""

INDEX_HTML = """<!doctype html><meta charset="utf-8">
<title>Is Go {{ label }} out yet?</title>
""" + _STYLE + """
<h1>Is Go {{ label }} out yet?</h1>
<div class="answer {{ 'yes' if satisfied else 'no' }}">
{% if satisfied %}<a href="{{ check_target }}">YES!</a>{% else %}No. :-({% endif %}
</div>
<p class="meta">checking <a href="{{ check_target }}">{{ check_target }}</a></p>
""" + _FORM + "\n"

FORM_HTML = """<!doctype html><meta charset="utf-8">
<title>Basic Weather App</title>
""" + _STYLE + """
<h1>Basic Weather App</h1>
""" + _FORM + "\n"

RESULT_HTML = """<!doctype html><meta charset="utf-8">
<title>Basic Weather App</title>
""" + _STYLE + """
<h1>The weather in {{ report.city }}, {{ report.region }} is:</h1>
<h2>{% if report.weather_icon %}<img src="{{ report.weather_icon }}" alt="">{% endif %}
{{ report.weather_text }}, at {{ report.temp }} degrees Fahrenheit</h2>
{% if report.current.humidity is not none %}<p class="meta">humidity {{ report.current.humidity }}%
{% if report.current.wind_mph is not none %} | wind {{ report.current.wind_mph }} mph {{ report.current.wind_dir or '' }}{% endif %}</p>{% endif %}
""" + _FORM + "\n"

ERROR_HTML = """<!doctype html><meta charset="utf-8">
<title>Basic Weather App</title>
""" + _STYLE + """
<h1>Could not look up the weather</h1>
<p class="err">{{ message }}</p>
""" + _FORM + "\n"

# served as-is when a template itself fails to render
FALLBACK_HTML = """<!doctype html><meta charset="utf-8">
<title>Error</title><h1>Internal error</h1><p>The page could not be rendered.</p>
"""

_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))

TEMPLATES = {
    "index": _env.from_string(INDEX_HTML),
    "form": _env.from_string(FORM_HTML),
    "result": _env.from_string(RESULT_HTML),
    "error": _env.from_string(ERROR_HTML),
}


def render(name: str, **context) -> str:
    return TEMPLATES[name].render(**context)
