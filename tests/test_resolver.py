import unittest

from fake_browser import FakeElement, FakePage, button

from linkpilot.models import SelectorSpec
from linkpilot.resolver import attempted_trail, element_state, find_button_by_text, probe, resolve, resolve_all

SPEC = SelectorSpec("target", ("#primary", ".secondary", "button.tertiary"))


class ResolveTests(unittest.TestCase):
    def test_first_interactable_candidate_wins(self) -> None:
        page = FakePage(elements=[button(".secondary"), button("button.tertiary")])
        found = resolve(page, SPEC, timeout_ms=10)
        assert found is not None
        self.assertEqual(found.selector, ".secondary")

    def test_hidden_or_disabled_match_counts_as_missing(self) -> None:
        page = FakePage(
            elements=[
                button("#primary", visible=False),
                button(".secondary", enabled=False),
                button("button.tertiary"),
            ]
        )
        found = resolve(page, SPEC, timeout_ms=10)
        assert found is not None
        self.assertEqual(found.selector, "button.tertiary")

    def test_exhaustion_returns_none(self) -> None:
        page = FakePage(elements=[button("#other")])
        self.assertIsNone(resolve(page, SPEC, timeout_ms=10))
        self.assertIsNone(probe(page, SPEC))

    def test_scope_limits_lookup_to_children(self) -> None:
        inner = button(".secondary", text="inside")
        container = FakeElement(selectors=(".card",), children=[inner])
        page = FakePage(elements=[button("#primary", text="outside"), container])
        scope = page.locator(".card").first
        found = resolve(page, SPEC, timeout_ms=10, scope=scope)
        assert found is not None
        self.assertEqual(found.locator.inner_text(), "inside")

    def test_element_state_for_missing_element(self) -> None:
        page = FakePage()
        state = element_state(page.locator("#nothing").first)
        self.assertFalse(state.present)
        self.assertFalse(state.interactable)

    def test_resolve_all_skips_hidden_inputs(self) -> None:
        spec = SelectorSpec("inputs", ('input[type="text"]', 'input[type="email"]'))
        page = FakePage(
            elements=[
                button('input[type="text"]'),
                button('input[type="text"]', visible=False),
                button('input[type="email"]'),
            ]
        )
        self.assertEqual(len(resolve_all(page, spec)), 2)

    def test_empty_selector_chain_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SelectorSpec("empty", ())

    def test_attempted_trail_lists_every_candidate(self) -> None:
        other = SelectorSpec("other", ("#x",))
        self.assertEqual(attempted_trail(SPEC, other), ("#primary", ".secondary", "button.tertiary", "#x"))


class FindButtonByTextTests(unittest.TestCase):
    def test_vocabulary_order_beats_document_order(self) -> None:
        page = FakePage(elements=[button("button", text="Next"), button("button", text="Continue")])
        match = find_button_by_text(page, ("continue", "next"), scope_selector="button")
        assert match is not None
        self.assertEqual(match[1], "continue")
        self.assertEqual(match[0].locator.inner_text(), "Continue")

    def test_aria_label_only_when_requested(self) -> None:
        page = FakePage(elements=[button("button", attrs={"aria-label": "Invite Jane to connect"})])
        self.assertIsNone(find_button_by_text(page, ("connect",), scope_selector="button"))
        match = find_button_by_text(page, ("connect",), scope_selector="button", include_aria_label=True)
        self.assertIsNotNone(match)

    def test_disabled_text_match_is_skipped(self) -> None:
        page = FakePage(elements=[button("button", text="Verify", enabled=False)])
        self.assertIsNone(find_button_by_text(page, ("verify",), scope_selector="button"))


if __name__ == "__main__":
    unittest.main()
