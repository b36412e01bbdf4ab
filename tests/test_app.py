import asyncio

from textual import events

from reqtui.app import ReqtuiApp
from reqtui.config import Settings
from reqtui.focus import Focus
from reqtui.state import Mode


def make_app(tmp_path):
    return ReqtuiApp(Settings(requests_dir=tmp_path / "requests", log_file=None))


def test_keys_reach_the_session(tmp_path):
    async def scenario():
        app = make_app(tmp_path)
        async with app.run_test() as pilot:
            await pilot.press("e")
            assert app.session.mode is Mode.EDITING
            await pilot.press("h", "t", "tab")
            assert app.session.request.url == "ht"
            assert app.session.focus is Focus.METHOD
            await pilot.press("tab", "tab")
            assert app.session.focus is Focus.BODY
            assert app.session.body_input.value == ""
            await pilot.press("escape")
            assert app.session.mode is Mode.IDLE

    asyncio.run(scenario())


def test_save_from_the_app_writes_a_file(tmp_path):
    async def scenario():
        app = make_app(tmp_path)
        async with app.run_test() as pilot:
            await pilot.press("e", "h", "ctrl+o", "p", "enter")
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.session.mode is Mode.EDITING
            assert [request.name for request in app.session.saved_requests] == ["p"]

    asyncio.run(scenario())
    assert (tmp_path / "requests" / "p.json").exists()


def test_unexpected_storage_failure_is_reported(tmp_path, monkeypatch):
    def broken(directory):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("reqtui.app.load_requests", broken)

    async def scenario():
        app = make_app(tmp_path)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.is_running
            assert "disk on fire" in app.session.last_error
            await pilot.press("e")
            assert app.session.mode is Mode.EDITING

    asyncio.run(scenario())


def test_paste_goes_to_the_focused_field(tmp_path):
    async def scenario():
        app = make_app(tmp_path)
        async with app.run_test() as pilot:
            await pilot.press("e")
            app.query_one("#session-view").post_message(events.Paste("http://x"))
            await pilot.pause()
            assert app.session.request.url == "http://x"
            await pilot.press("shift+tab")
            app.query_one("#session-view").post_message(events.Paste('{"a":\n1}'))
            await pilot.pause()
            assert app.session.request.body == '{"a":\n1}'
            assert app.session.request.url == "http://x"

    asyncio.run(scenario())
