import json

import pytest

from roadmap_ai.presentation import DISPLAY_NAME_KEY

ROADMAP = {
	"title": "Python",
	"overview": "From scripts to services.",
	"stages": [
		{
			"title": "Beginner",
			"duration": "2-3 weeks",
			"items": [
				{"name": "Syntax", "description": "Variables and loops."},
				{
					"name": "Functions",
					"resources": [
						{"label": "Talk", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
						{"label": "Docs", "url": "https://docs.python.org/3/"},
					],
				},
			],
		},
		{"title": "Intermediate", "items": [{"name": "Packaging"}]},
		{"title": "Advanced", "items": [{"name": "Async"}]},
	],
}


def _study(client, action, *, stage=0, lesson=0, target=None, roadmap=ROADMAP):
	data = {"roadmap": json.dumps(roadmap), "action": action, "stage": str(stage), "lesson": str(lesson)}
	if target is not None:
		data["target"] = str(target)
	return client.post("/Python/study", data=data)


def test_landing_greets_anonymous_visitor(client):
	r = client.get("/")
	assert r.status_code == 200
	assert "Welcome!" in r.text
	for label in ("React", "Java", "Node.js", "Python", "Kubernetes"):
		assert label in r.text
	assert "Popular Roadmaps" in r.text


def test_landing_greets_by_stored_name(client):
	client.cookies.set(DISPLAY_NAME_KEY, "Ada")
	r = client.get("/")
	assert "Welcome, Ada!" in r.text


def test_setting_display_name(client):
	r = client.post("/name", data={"name": "  Grace "}, follow_redirects=False)
	assert r.status_code == 303
	assert r.headers["location"] == "/"
	assert r.cookies.get(DISPLAY_NAME_KEY) == "Grace"


def test_invalid_display_name(client):
	r = client.post("/name", data={"name": "G"}, follow_redirects=False)
	assert r.status_code == 400
	assert "name must be 2-20 characters" in r.text


@pytest.mark.parametrize("q, location", [("  React ", "/React/detail"), ("Node.js", "/Node.js/detail"), ("System Design", "/System%20Design/detail"), ("   ", "/")])
def test_search_redirects(client, gemini, q, location):
	r = client.get("/search", params={"q": q}, follow_redirects=False)
	assert r.status_code == 303
	assert r.headers["location"] == location
	assert gemini.requests == []


def test_detail_renders_timeline(client, gemini):
	gemini.reply("```json\n" + json.dumps(ROADMAP) + "\n```")
	r = client.get("/Python/detail")
	assert r.status_code == 200
	assert "From scripts to services." in r.text
	for title in ("Beginner", "Intermediate", "Advanced", "2-3 weeks"):
		assert title in r.text
	assert "Start Learning" in r.text
	assert '"Python"' in gemini.prompts[0]


def test_detail_topic_with_spaces(client, gemini):
	gemini.reply(json.dumps(ROADMAP))
	r = client.get("/System%20Design/detail")
	assert r.status_code == 200
	assert '"System Design"' in gemini.prompts[0]


@pytest.mark.parametrize(
	"setup",
	[
		lambda g: g.fail(500, "boom"),
		lambda g: g.reply("not json"),
		lambda g: g.reply("[1, 2]"),
	],
)
def test_detail_collapses_errors(client, gemini, setup):
	setup(gemini)
	r = client.get("/Python/detail")
	assert r.status_code >= 400
	assert "Could not fetch roadmap." in r.text
	assert "boom" not in r.text


def test_detail_without_credential(client, gemini, use_settings):
	use_settings(GEMINI_API_KEY=None)
	r = client.get("/Python/detail")
	assert r.status_code == 500
	assert "Could not fetch roadmap." in r.text
	assert gemini.requests == []


def test_study_start_shows_first_lesson(client, gemini):
	r = _study(client, "start")
	assert r.status_code == 200
	assert "Syntax" in r.text
	assert "Variables and loops." in r.text
	assert "Next Lesson" in r.text
	assert "Stage complete!" not in r.text
	assert gemini.requests == []


def test_study_next_lesson_embeds_youtube(client):
	r = _study(client, "next")
	assert "Functions" in r.text
	assert "https://www.youtube.com/embed/dQw4w9WgXcQ" in r.text
	assert "https://docs.python.org/3/" in r.text
	assert "Complete Stage" in r.text


def test_study_complete_stage_advances_and_celebrates(client):
	r = _study(client, "complete", stage=0, lesson=1)
	assert "Stage complete!" in r.text
	assert 'name="stage" value="1"' in r.text
	assert "Packaging" in r.text


def test_study_complete_last_stage_stays(client):
	r = _study(client, "complete", stage=2, lesson=0)
	assert "Stage complete!" in r.text
	assert 'name="stage" value="2"' in r.text
	assert "Async" in r.text


def test_study_select_stage(client):
	r = _study(client, "select", stage=0, lesson=1, target=1)
	assert 'name="stage" value="1"' in r.text
	assert 'name="lesson" value="0"' in r.text


def test_study_rejects_bad_input(client):
	assert _study(client, "start", roadmap="[]").status_code == 400
	r = client.post("/Python/study", data={"roadmap": "{oops", "action": "start"})
	assert r.status_code == 400
	assert _study(client, "jump").status_code == 400


def test_page_form_errors_keep_default_validation(client):
	r = client.post("/Python/study", data={"action": "start"})
	assert r.status_code == 422
	assert "detail" in r.json()
