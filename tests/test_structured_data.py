import json

from moodlift.structured_data import render_structured_data, serialize, stable_hash


def test_stable_hash_matches_known_values():
    assert stable_hash("") == "0"
    assert stable_hash("{}") == "31e"
    assert stable_hash("a") == "2p"


def test_stable_hash_wraps_to_32_bits():
    value = stable_hash("x" * 200)
    assert int(value, 36) <= 2**31


def test_default_id_is_derived_from_payload():
    assert render_structured_data({}) == '<script id="jsonld-31e" type="application/ld+json">{}</script>'
    script = {"@context": "https://schema.org", "@type": "WebSite", "name": "MoodLift"}
    html = render_structured_data(script)
    assert html == render_structured_data(dict(script))
    assert f'id="jsonld-{stable_hash(serialize(script))}"' in html


def test_explicit_id_and_compact_json():
    html = render_structured_data({"name": "Café", "tags": [1, 2]}, script_id="org-schema")
    assert html.startswith('<script id="org-schema" type="application/ld+json">')
    assert '{"name":"Café","tags":[1,2]}' in html


def test_closing_tags_are_escaped():
    html = render_structured_data({"description": "</script><script>alert(1)</script>"})
    body = html[html.index(">") + 1 : -len("</script>")]
    assert "</" not in body
    assert json.loads(body)["description"] == "</script><script>alert(1)</script>"
