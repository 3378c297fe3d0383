"""Fallback selector chains for every logical UI target.

Each chain is ordered by preference. Markup on the target site is not
versioned, so older variants stay in the chain after newer ones are added.
"""

from __future__ import annotations

from linkpilot.models import SelectorSpec

# Login surface.
LOGIN_USERNAME = SelectorSpec(
    "login username",
    ("#username", 'input[name="session_key"]', 'input[autocomplete="username"]'),
)
LOGIN_PASSWORD = SelectorSpec(
    "login password",
    ("#password", 'input[name="session_password"]', 'input[type="password"]'),
)
LOGIN_SUBMIT = SelectorSpec(
    "login submit",
    (
        'button[type="submit"]',
        "button.sign-in-form__submit-btn",
        'button[data-litms-control-urn="login-submit"]',
    ),
)

TWO_FACTOR_INPUT = SelectorSpec(
    "two-factor input",
    (
        "#input__phone_verification_pin",
        "#input__email_verification_pin",
        'input[name="pin"]',
        'input[autocomplete="one-time-code"]',
    ),
)
TWO_FACTOR_SUBMIT = SelectorSpec(
    "two-factor submit",
    ("#two-step-submit-button", 'button[type="submit"]', "button.form__submit"),
)

CHALLENGE_INPUT = SelectorSpec(
    "challenge input",
    (
        ".form__input--floating",
        'input[name="email-address"]',
        'input[name="security-code"]',
        'input[id*="verification"]',
    ),
)
CHECKPOINT_TEXT_INPUTS = SelectorSpec(
    "checkpoint text inputs",
    ('input[type="text"]', 'input[type="email"]', 'input[type="tel"]'),
)
CHECKPOINT_GENERIC_BUTTONS = SelectorSpec(
    "checkpoint generic buttons",
    (
        'button[type="submit"]',
        "button.artdeco-button--primary",
        "button.primary-action-button",
        "button.form__submit",
        "button.artdeco-button",
        "a.primary-action-button",
        'input[type="submit"]',
        "button",
    ),
)

AUTHENTICATED_LANDMARK = SelectorSpec(
    "authenticated landmark",
    (".feed-identity-module", ".global-nav", ".authentication-outlet", "#global-nav"),
)
AUTHWALL_LANDMARK = SelectorSpec(
    "auth wall landmark",
    (
        ".authwall-join-form",
        "section.authwall",
        'form[data-id="sign-in-form"]',
        '[data-tracking-control-name*="authwall"]',
    ),
)

PROFILE_MENU = SelectorSpec(
    "profile menu",
    (
        "button.global-nav__primary-link-me-menu-trigger",
        "button.global-nav__primary-link",
        "button.artdeco-dropdown__trigger",
    ),
)
SIGN_OUT = SelectorSpec(
    "sign out",
    ('a[href*="/m/logout"]', 'a[href*="/logout"]', "button.global-nav__secondary-item"),
)

# Posts.
POST_CONTAINER = SelectorSpec(
    "post container",
    (".feed-shared-update-v2", "article.ember-view", ".artdeco-card"),
)
LIKE_BUTTON = SelectorSpec(
    "like button",
    (
        "button.react-button__trigger",
        "button.option-component--like-button",
        'button[aria-label*="Like" i]',
        'button.artdeco-button[aria-label*="like" i]',
    ),
)
COMMENT_BUTTON = SelectorSpec(
    "comment button",
    (
        "button.comment-button",
        'button[aria-label*="Comment" i]',
        'button.artdeco-button[aria-label*="comment" i]',
    ),
)
COMMENT_TEXTBOX = SelectorSpec(
    "comment box",
    (
        ".comments-comment-box__form-container .ql-editor",
        ".comments-comment-box__text-input",
        "div.ql-editor",
        'div[role="textbox"]',
        "textarea.comments-comment-box__text-editor",
    ),
)
COMMENT_SUBMIT = SelectorSpec(
    "comment submit",
    (
        "button.comments-comment-box__submit-button",
        'button[type="submit"]',
        "button.artdeco-button--primary",
    ),
)
SHARE_BUTTON = SelectorSpec(
    "share button",
    (
        "button.share-actions__primary-action",
        'button.artdeco-button[aria-label*="repost" i]',
        'button.artdeco-button[aria-label*="share" i]',
        'button[data-control-name="share"]',
        '.feed-shared-control-menu__item[aria-label*="share" i]',
        '.feed-shared-control-menu__item[aria-label*="repost" i]',
    ),
)
SHARE_DIALOG = SelectorSpec(
    "share dialog",
    (".share-box__content", ".artdeco-modal__content", 'div[role="dialog"]', ".share-creation-state"),
)
SHARE_TEXTAREA = SelectorSpec(
    "share text area",
    (
        'div[role="textbox"]',
        ".share-creation-state__textarea",
        ".ql-editor",
        ".mentions-texteditor__content",
    ),
)
SHARE_SUBMIT = SelectorSpec(
    "share submit",
    (
        "button.share-actions__primary-action",
        "button.share-creation-state__submit",
        'button[aria-label*="Post" i]',
        'button[aria-label*="Share" i]',
        "button.artdeco-button--primary",
    ),
)

# Profiles.
PROFILE_LANDMARK = SelectorSpec(
    "profile landmark",
    (".pv-top-card", ".artdeco-card.ember-view.pv-top-card", "main .ph5", "section.artdeco-card"),
)
PROFILE_CONNECT_BUTTON = SelectorSpec(
    "connect button",
    (
        ".pv-s-profile-actions--connect",
        'button.artdeco-button[aria-label*="Connect"]',
        'button[aria-label*="Invite" i][aria-label*="connect" i]',
        'button[data-control-name="connect"]',
        "button.pv-s-profile-actions__connect",
    ),
)
PROFILE_FOLLOW_BUTTON = SelectorSpec(
    "follow button",
    (
        ".pv-s-profile-actions--follow",
        'button.artdeco-button[aria-label*="Follow"]',
        'button[data-control-name="follow"]',
        "button.org-company-follow-button",
    ),
)
ADD_NOTE_BUTTON = SelectorSpec(
    "add note button",
    (
        'button[aria-label="Add a note"]',
        'button[aria-label*="Add a note" i]',
        ".artdeco-modal__content button.artdeco-button",
        ".send-invite button.artdeco-button",
    ),
)
CONNECTION_MESSAGE_FIELD = SelectorSpec(
    "connection note field",
    (
        ".send-invite__custom-message",
        "textarea#custom-message",
        ".artdeco-modal__content textarea",
        'textarea[name="message"]',
    ),
)
SEND_CONNECTION_BUTTON = SelectorSpec(
    "send invitation button",
    (
        'button[aria-label="Send now"]',
        'button[aria-label*="Send" i]',
        ".artdeco-modal__content button.artdeco-button--primary",
        ".send-invite__actions button:last-child",
    ),
)
MODAL_PRIMARY_BUTTON = SelectorSpec(
    "modal primary button",
    (".artdeco-modal__actionbar button.artdeco-button--primary",),
)
PROFILE_MESSAGE_BUTTON = SelectorSpec(
    "message button",
    (
        "button.pv-s-profile-actions__message",
        'button[aria-label*="Message"]',
        'a[href*="/messaging/compose"]',
    ),
)
MESSAGE_COMPOSE = SelectorSpec(
    "message compose box",
    (".msg-form__contenteditable", ".msg-form__message-texteditor", 'div[role="textbox"]'),
)
MESSAGE_SEND = SelectorSpec(
    "message send button",
    ("button.msg-form__send-button", 'button[type="submit"]'),
)

# Extraction.
PROFILE_NAME = SelectorSpec(
    "profile name",
    (
        ".pv-top-card--list .text-heading-xlarge",
        "h1.text-heading-xlarge",
        ".ph5 h1",
        "h1[data-generated-cert-name]",
        ".profile-topcard-person-entity__name",
        'h1[class*="text-heading"]',
        "h1",
    ),
)
PROFILE_HEADLINE = SelectorSpec(
    "profile headline",
    (
        ".pv-top-card--list .text-body-medium",
        ".ph5 .text-body-medium",
        ".pv-text-details__left-panel .text-body-medium",
        "div.text-body-medium.break-words",
        ".artdeco-entity-lockup__subtitle",
        '[class*="headline"]',
    ),
)
PROFILE_LOCATION = SelectorSpec(
    "profile location",
    (
        ".pv-top-card--list .text-body-small[aria-label]",
        ".ph5 .text-body-small.inline.t-black--light.break-words",
        ".pv-text-details__left-panel .text-body-small",
        ".pv-top-card-section__location",
        'span[class*="location"]',
    ),
)
PROFILE_CONNECTIONS = SelectorSpec(
    "profile connections",
    (
        ".pv-top-card--list-bullet li:nth-child(2)",
        ".pv-top-card-section__connections",
        'a[href*="/mynetwork/"] span.t-bold',
        "ul.pv-top-card--list-bullet li:last-child",
    ),
)
PROFILE_ABOUT = SelectorSpec(
    "profile about",
    (
        "#about ~ div .pv-shared-text-with-see-more",
        ".pv-about-section .pv-about__summary-text",
        ".pv-about-section",
        'section[data-section="summary"]',
        'div[id*="about"] p',
    ),
)
PROFILE_EXPERIENCE = SelectorSpec(
    "profile experience",
    ("#experience ~ div .pvs-entity", "#experience .pv-entity__summary-info"),
)
PROFILE_EDUCATION = SelectorSpec(
    "profile education",
    ("#education ~ div .pvs-entity", "#education .pv-entity__summary-info"),
)
PROFILE_SKILLS = SelectorSpec(
    "profile skills",
    ("#skills ~ div .pvs-entity__pill-text", "#skills .pv-skill-category-entity__name"),
)

POST_AUTHOR_NAME = SelectorSpec(
    "post author name",
    (
        ".update-components-actor__name",
        ".feed-shared-actor__name",
        ".nt-card-creator__name",
        ".feed-shared-actor__title",
        'a[data-control-name="actor"]',
    ),
)
POST_AUTHOR_HEADLINE = SelectorSpec(
    "post author headline",
    (
        ".update-components-actor__description",
        ".feed-shared-actor__description",
        ".nt-card-creator__headline",
    ),
)
POST_AUTHOR_LINK = SelectorSpec(
    "post author link",
    (
        ".update-components-actor__meta-link",
        ".feed-shared-actor__container a",
        ".nt-card-creator__details a",
        'a[data-control-name="actor"]',
    ),
)
POST_TEXT = SelectorSpec(
    "post text",
    (
        ".feed-shared-update-v2__description-wrapper",
        ".feed-shared-update-v2__description",
        ".feed-shared-text",
        ".feed-shared-text-view",
        ".feed-shared-update-v2__commentary",
    ),
)
POST_DATE = SelectorSpec(
    "post date",
    (
        ".update-components-actor__sub-description",
        ".feed-shared-actor__sub-description",
        ".post-share-time",
        "time",
    ),
)
POST_LINK = SelectorSpec(
    "post link",
    (
        ".update-components-actor__meta-link",
        ".feed-shared-actor__meta-link",
        'a[href*="/feed/update/"]',
    ),
)
POST_ENGAGEMENT = SelectorSpec(
    "post engagement",
    (
        ".social-details-social-counts__reactions-count",
        ".social-details-social-counts__social-proof-text",
    ),
)
