"""Discord front-end tests using light interaction fakes over real ``discord.py`` types."""

from __future__ import annotations

import asyncio
import types

import discord
from discord.ext import commands

from whitelist_bot.commands.handlers import (
    delete_application,
    review_application,
    show_own_status,
    submit_application,
)
from whitelist_bot.commands.register import register_commands
from whitelist_bot.commands.utils import in_designated_channel, requester_from_interaction
from whitelist_bot.config import Settings
from whitelist_bot.core.models import ApplicationStatus
from whitelist_bot.ui.modals import ApplicationModal, RejectReasonModal
from whitelist_bot.ui.views import AttestationView, ContinueView, ReviewButton

ADMIN_ROLE = "55"
SETTINGS = Settings(token="", admin_role_id=ADMIN_ROLE, application_channel_id="300")


class FakeResponse:
    def __init__(self) -> None:
        self.messages: list[tuple[str | None, dict]] = []
        self.modals: list[discord.ui.Modal] = []
        self._done = False

    def is_done(self) -> bool:
        return self._done

    async def send_message(self, content=None, **kwargs) -> None:
        self.messages.append((content, kwargs))
        self._done = True

    async def send_modal(self, modal) -> None:
        self.modals.append(modal)
        self._done = True

    async def defer(self, **_kwargs) -> None:
        self._done = True


class FakeFollowup:
    def __init__(self) -> None:
        self.messages: list[tuple[str | None, dict]] = []

    async def send(self, content=None, **kwargs) -> None:
        self.messages.append((content, kwargs))


class FakeMessage:
    def __init__(self, fail: bool = False) -> None:
        self.embeds: list[discord.Embed] = []
        self.edits: list[dict] = []
        self.fail = fail

    async def edit(self, **kwargs) -> None:
        if self.fail:
            raise discord.HTTPException(types.SimpleNamespace(status=500, reason="boom"), "boom")
        self.edits.append(kwargs)


class FakeUser:
    def __init__(self, user_id: int, name: str, roles: list, dms_closed: bool = False) -> None:
        self.id = user_id
        self.name = name
        self.display_name = name.title()
        self.roles = roles
        self.display_avatar = None
        self.dms: list[dict] = []
        self.dms_closed = dms_closed

    async def send(self, content=None, **kwargs) -> None:
        if self.dms_closed:
            raise discord.Forbidden(
                types.SimpleNamespace(status=403, reason="Forbidden"),
                "Cannot send messages to this user",
            )
        self.dms.append({"content": content, **kwargs})


def fill(item: discord.ui.TextInput, value: str, interaction) -> None:
    """Set an input the way a submitted modal payload does."""
    item._refresh_state(interaction, {"type": 4, "custom_id": item.custom_id, "value": value})


def make_interaction(
    engine,
    user_id: int = 1001,
    name: str = "tommy",
    admin: bool = False,
    channel_id: int = 300,
    message: FakeMessage | None = None,
    dms_closed: bool = False,
) -> types.SimpleNamespace:
    roles = [types.SimpleNamespace(id=1, name="@everyone")]
    if admin:
        roles.append(types.SimpleNamespace(id=int(ADMIN_ROLE), name="Staff"))
    user = FakeUser(user_id, name, roles, dms_closed=dms_closed)
    return types.SimpleNamespace(
        user=user,
        channel_id=channel_id,
        response=FakeResponse(),
        followup=FakeFollowup(),
        message=message,
        client=types.SimpleNamespace(engine=engine, settings=SETTINGS),
    )


def replies(interaction) -> list[str]:
    return [c for c, _ in interaction.response.messages + interaction.followup.messages if c]


def test_requester_from_interaction_maps_admin_role(engine) -> None:
    admin = requester_from_interaction(make_interaction(engine, admin=True), ADMIN_ROLE)
    assert admin.is_admin is True
    assert admin.id == "1001"
    assert admin.roles == ["Staff"]

    member = requester_from_interaction(make_interaction(engine), ADMIN_ROLE)
    assert member.is_admin is False
    assert requester_from_interaction(make_interaction(engine, admin=True), None).is_admin is False


def test_in_designated_channel(engine) -> None:
    assert in_designated_channel(make_interaction(engine, channel_id=300), "300")
    assert not in_designated_channel(make_interaction(engine, channel_id=301), "300")
    assert in_designated_channel(make_interaction(engine, channel_id=301), None)


def test_submit_success_and_validation_errors(engine, payload, make_payload, words, applicant, store) -> None:
    interaction = make_interaction(engine)
    app = asyncio.run(submit_application(engine, interaction, applicant, payload))
    assert app is not None
    assert "Application Submitted Successfully!" in replies(interaction)[0]
    assert app.id in replies(interaction)[0]

    interaction = make_interaction(engine)
    bad = make_payload(aboutYourself=words(5), characterBackstory="short")
    assert asyncio.run(submit_application(engine, interaction, applicant, bad)) is None
    text = replies(interaction)[0]
    assert "about_yourself" in text and "character_backstory" in text
    assert len(store.list()) == 1


def test_review_removes_buttons_from_prompt(engine, payload, applicant, admin) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application
    message = FakeMessage()
    interaction = make_interaction(engine, admin=True, message=message)

    reviewed = asyncio.run(
        review_application(engine, interaction, admin, app.id, ApplicationStatus.APPROVED)
    )
    assert reviewed.status is ApplicationStatus.APPROVED
    assert replies(interaction) == ["Application approved successfully."]
    assert message.edits[0]["view"] is None
    assert "APPROVED" in message.edits[0]["embeds"][-1].description


def test_failed_prompt_edit_does_not_undo_review(engine, payload, applicant, admin) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application
    interaction = make_interaction(engine, admin=True, message=FakeMessage(fail=True))
    reviewed = asyncio.run(
        review_application(engine, interaction, admin, app.id, ApplicationStatus.APPROVED)
    )
    assert reviewed is not None
    assert engine.get(app.id).status is ApplicationStatus.APPROVED


def test_double_click_reports_earlier_decision(engine, payload, applicant, admin, other_admin, notifier) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application
    first = make_interaction(engine, admin=True)
    second = make_interaction(engine, user_id=9002, name="lance", admin=True)

    asyncio.run(review_application(engine, first, admin, app.id, ApplicationStatus.APPROVED))
    result = asyncio.run(
        review_application(engine, second, other_admin, app.id, ApplicationStatus.APPROVED)
    )

    assert result is None
    assert replies(second) == [
        "This application has already been **approved** by Ken Rosenberg."
    ]
    assert len(notifier.reviews) == 1


def test_non_admin_review_is_refused(engine, payload, applicant) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application
    interaction = make_interaction(engine)
    asyncio.run(
        review_application(engine, interaction, applicant, app.id, ApplicationStatus.APPROVED)
    )
    assert replies(interaction) == ["You do not have permission to do that."]
    assert engine.get(app.id).is_pending


def test_delete_and_status(engine, payload, applicant, admin) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application

    interaction = make_interaction(engine)
    asyncio.run(show_own_status(engine, interaction, applicant))
    assert app.id in replies(interaction)[0]
    assert "pending" in replies(interaction)[0]

    interaction = make_interaction(engine)
    assert asyncio.run(delete_application(engine, interaction, applicant, app.id)) is False

    interaction = make_interaction(engine, admin=True)
    assert asyncio.run(delete_application(engine, interaction, admin, app.id)) is True
    assert replies(interaction) == [f"Application `{app.id}` deleted."]

    interaction = make_interaction(engine)
    asyncio.run(show_own_status(engine, interaction, applicant))
    assert "not submitted" in replies(interaction)[0]


def test_review_buttons(engine, payload, applicant, notifier) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application

    async def scenario() -> None:
        details = ReviewButton("details", app.id)
        assert details.item.custom_id == f"whitelist:details:{app.id}"
        interaction = make_interaction(engine, admin=True)
        await details.callback(interaction)
        assert interaction.response.messages[0][1]["embed"].title.endswith("Tommy Vercetti")

        reject = ReviewButton("reject", app.id)
        interaction = make_interaction(engine, user_id=9001, name="ken", admin=True)
        await reject.callback(interaction)
        modal = interaction.response.modals[0]
        assert isinstance(modal, RejectReasonModal)

        submit = make_interaction(engine, user_id=9001, name="ken", admin=True)
        fill(modal.reason_input, "Backstory too thin", submit)
        await modal.on_submit(submit)
        assert replies(submit) == ["Application rejected successfully."]

    asyncio.run(scenario())
    stored = engine.get(app.id)
    assert stored.status is ApplicationStatus.REJECTED
    assert stored.review_reason == "Backstory too thin"
    assert stored.reviewer_id == "9001"
    assert notifier.reviews[0][1] == "Ken"


def test_approve_button_by_member_is_refused(engine, payload, applicant) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application

    async def scenario():
        interaction = make_interaction(engine)
        await ReviewButton("approve", app.id).callback(interaction)
        return interaction

    interaction = asyncio.run(scenario())
    assert replies(interaction) == ["You do not have permission to do that."]
    assert engine.get(app.id).is_pending


def test_whitelist_command_flow(engine, store, words) -> None:
    bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
    register_commands(bot, engine, SETTINGS)
    assert {"whitelist", "application_status", "delete_application"} <= {
        c.name for c in bot.tree.get_commands()
    }
    whitelist = bot.tree.get_command("whitelist")

    async def scenario() -> None:
        wrong_channel = make_interaction(engine, channel_id=999)
        await whitelist.callback(wrong_channel)
        assert "designated whitelist channel" in replies(wrong_channel)[0]
        assert wrong_channel.response.modals == []

        opened = make_interaction(engine)
        await whitelist.callback(opened)
        first = opened.response.modals[0]
        assert isinstance(first, ApplicationModal)
        assert first.discord_id_input.value == "1001"
        step = make_interaction(engine)
        fill(first.about_input, words(60), step)
        fill(first.experience_input, words(55), step)
        fill(first.steam_id_input, "110000146218998", step)
        fill(first.character_name_input, "Tommy Vercetti", step)
        await first.on_submit(step)
        continue_view = step.response.messages[0][1]["view"]
        assert isinstance(continue_view, ContinueView)

        step = make_interaction(engine)
        await continue_view.next_step.callback(step)
        second = step.response.modals[0]
        step = make_interaction(engine)
        fill(second.age_input, "34", step)
        fill(second.nationality_input, "American", step)
        fill(second.backstory_input, "b" * 120, step)
        await second.on_submit(step)
        attest = step.response.messages[0][1]["view"]
        assert isinstance(attest, AttestationView)
        attest.draft["rules_read"] = True

        step = make_interaction(engine)
        await attest.submit.callback(step)
        assert "Application Submitted Successfully!" in replies(step)[0]
        assert step.user.dms[0]["embed"].title == "Application Submitted Successfully!"

    asyncio.run(scenario())
    [app] = store.list()
    assert app.character_name == "Tommy Vercetti"
    assert app.discord_id == "1001"
    assert app.rules_read is True and app.cfx_linked is False
    assert app.content_creation is None


def test_delete_autocomplete(engine, payload, applicant) -> None:
    app = asyncio.run(engine.submit(payload, applicant)).application
    bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
    register_commands(bot, engine, SETTINGS)
    command = bot.tree.get_command("delete_application")
    autocomplete = command._params["application_id"].autocomplete

    choices = asyncio.run(autocomplete(make_interaction(engine), "tommy"))
    assert [c.value for c in choices] == [app.id]
    assert asyncio.run(autocomplete(make_interaction(engine), "nobody")) == []


def test_closed_dms_do_not_fail_submission(engine, payload, applicant, store) -> None:
    interaction = make_interaction(engine, dms_closed=True)
    app = asyncio.run(submit_application(engine, interaction, applicant, payload))
    assert app is not None
    assert "Application Submitted Successfully!" in replies(interaction)[0]
    assert interaction.user.dms == []
    assert len(store.list()) == 1


def test_confirmation_dm_lists_application(engine, payload, applicant) -> None:
    interaction = make_interaction(engine)
    app = asyncio.run(submit_application(engine, interaction, applicant, payload))
    [dm] = interaction.user.dms
    fields = {f.name: f.value for f in dm["embed"].fields}
    assert fields["Application ID"] == f"`{app.id}`"
    assert fields["Character Name"] == "Tommy Vercetti"
    assert fields["Status"] == "Pending Review"


def test_double_submit_creates_one_application(engine, store, notifier, payload, monkeypatch) -> None:
    record = notifier.notify_submitted

    async def slow_notify(application) -> None:
        await asyncio.sleep(0.05)
        await record(application)

    monkeypatch.setattr(notifier, "notify_submitted", slow_notify)
    view_draft = {**payload, "discordId": "1001"}

    async def scenario():
        view = AttestationView(engine, ADMIN_ROLE, view_draft)
        view.draft["rules_read"] = True
        first, second = make_interaction(engine), make_interaction(engine)
        await asyncio.gather(view.submit.callback(first), view.submit.callback(second))
        return view, first, second

    view, first, second = asyncio.run(scenario())
    assert len(store.list()) == 1
    assert len(notifier.submissions) == 1
    assert "Application Submitted Successfully!" in replies(first)[0]
    assert replies(second) == ["This application was already submitted."]
    assert view.is_finished()
