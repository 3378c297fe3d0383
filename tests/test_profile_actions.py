import unittest

from fake_browser import FakeElement, FakePage, button, fast_config

from linkpilot.constants import LIMITED_PROFILE_NOTE
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import AuthWallError, ConfigurationError, UIDriftError
from linkpilot.executor import execute
from linkpilot.models import ActionContext, ActionRequest

PROFILE_URL = "https://social.test/in/jane-doe/"


def _context(page: FakePage) -> ActionContext:
    return ActionContext(page=page, config=fast_config(), sink=DiagnosticSink())


def _request(operation: str, url: str = PROFILE_URL, **params: object) -> ActionRequest:
    return ActionRequest.from_dict({"resource": "profile", "operation": operation, "url": url, "params": params})


def _open_invite_modal(page: FakePage, with_note: bool = False) -> None:
    def mark_pending(_el: FakeElement) -> None:
        page.html = "<button>Pending</button>"

    if with_note:
        note_field = button(".send-invite__custom-message")
        page.add(button('button[aria-label="Add a note"]', on_click=lambda _el: page.add(note_field)))
    page.add(button('button[aria-label="Send now"]', text="Send", on_click=mark_pending))


class ConnectTests(unittest.TestCase):
    def test_profile_without_connect_control_fails_loudly(self) -> None:
        page = FakePage(elements=[button("button", text="Message"), button("button", text="More")])
        with self.assertRaises(UIDriftError) as ctx:
            execute(_context(page), _request("connect"))
        self.assertIn("connect button not found", str(ctx.exception))
        self.assertEqual([wait for _, wait in page.gotos], ["domcontentloaded"])

    def test_connect_chain_then_send(self) -> None:
        page = FakePage()
        page.add(button(".pv-s-profile-actions--connect", on_click=lambda _el: _open_invite_modal(page)))
        result = execute(_context(page), _request("connect"))
        self.assertEqual(result.action, "connection request sent")
        self.assertEqual(
            result.payload["uiState"],
            {
                "connectButtonFound": True,
                "addNoteButtonFound": False,
                "sendButtonFound": True,
                "hasPendingIndicator": True,
            },
        )

    def test_connect_with_note(self) -> None:
        page = FakePage()
        page.add(button(".pv-s-profile-actions--connect", on_click=lambda _el: _open_invite_modal(page, True)))
        result = execute(_context(page), _request("connect", connectionMessage="Hi Jane"))
        self.assertTrue(result.payload["uiState"]["addNoteButtonFound"])
        self.assertEqual(result.payload["message"], "Hi Jane")
        field = [el for el in page.elements if ".send-invite__custom-message" in el.selectors][0]
        self.assertEqual(field.value, "Hi Jane")

    def test_primary_button_text_tier_used_before_generic_buttons(self) -> None:
        page = FakePage()
        generic = button("button", text="Connect with the team")
        primary = button(
            "button.artdeco-button--primary",
            text="Connect",
            on_click=lambda _el: _open_invite_modal(page),
        )
        page.add(generic, primary)
        execute(_context(page), _request("connect"))
        self.assertEqual(primary.clicks, 1)
        self.assertEqual(generic.clicks, 0)

    def test_aria_label_is_the_last_resort(self) -> None:
        page = FakePage()
        target = button(
            "button",
            attrs={"aria-label": "Invite Jane to connect"},
            on_click=lambda _el: _open_invite_modal(page),
        )
        page.add(target)
        execute(_context(page), _request("connect"))
        self.assertEqual(target.clicks, 1)

    def test_missing_send_control_is_drift(self) -> None:
        page = FakePage(elements=[button(".pv-s-profile-actions--connect")])
        with self.assertRaises(UIDriftError) as ctx:
            execute(_context(page), _request("connect"))
        self.assertIn("Send invitation", str(ctx.exception))

    def test_auth_wall_is_fatal(self) -> None:
        page = FakePage()
        page.routes[PROFILE_URL] = lambda p: setattr(p, "url", "https://social.test/authwall?trk=x")
        with self.assertRaises(AuthWallError):
            execute(_context(page), _request("connect"))

    def test_non_profile_url_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            execute(_context(FakePage()), _request("connect", url="https://social.test/feed/"))


class FollowMessageTests(unittest.TestCase):
    def test_follow_clicks_follow_button(self) -> None:
        follow = button(".pv-s-profile-actions--follow")
        result = execute(_context(FakePage(elements=[follow])), _request("follow"))
        self.assertEqual(result.action, "followed")
        self.assertEqual(follow.clicks, 1)

    def test_company_pages_can_be_followed(self) -> None:
        follow = button("button.org-company-follow-button")
        page = FakePage(elements=[follow])
        execute(_context(page), _request("follow", url="https://social.test/company/acme/"))
        self.assertEqual(follow.clicks, 1)

    def test_follow_missing_is_drift(self) -> None:
        with self.assertRaises(UIDriftError):
            execute(_context(FakePage()), _request("follow"))

    def test_message_is_typed_and_sent(self) -> None:
        page = FakePage()
        compose = button(".msg-form__contenteditable")
        send = button("button.msg-form__send-button")
        page.add(button("button.pv-s-profile-actions__message", on_click=lambda _el: page.add(compose, send)))
        result = execute(_context(page), _request("message", message="Hello"))
        self.assertEqual(result.action, "message sent")
        self.assertEqual(compose.value, "Hello")
        self.assertEqual(send.clicks, 1)


class ProfileInfoTests(unittest.TestCase):
    def test_fields_are_extracted(self) -> None:
        page = FakePage(
            elements=[
                button(".pv-top-card"),
                button("h1.text-heading-xlarge", text="Jane Doe"),
                button("div.text-body-medium.break-words", text="Engineer"),
                button(".pv-top-card-section__connections", text="500+ connections"),
                button(".pv-about-section", text="Builds things  see more"),
            ]
        )
        result = execute(_context(page), _request("getInfo"))
        data = result.payload["data"]
        self.assertEqual(result.action, "profile info retrieved")
        self.assertEqual(data["name"], "Jane Doe")
        self.assertEqual(data["headline"], "Engineer")
        self.assertEqual(data["connections"], "500+")
        self.assertEqual(data["about"], "Builds things")
        self.assertNotIn("extractionNote", data)

    def test_restricted_view_is_annotated(self) -> None:
        page = FakePage(elements=[button(".pv-top-card")])
        result = execute(_context(page), _request("getInfo"))
        self.assertEqual(result.payload["data"]["extractionNote"], LIMITED_PROFILE_NOTE)

    def test_auth_wall_landmark_is_fatal(self) -> None:
        page = FakePage(elements=[button(".authwall-join-form")])
        with self.assertRaises(AuthWallError):
            execute(_context(page), _request("getInfo"))


if __name__ == "__main__":
    unittest.main()
