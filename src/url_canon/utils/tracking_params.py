"""Query parameters treated as tracking / analytics noise by default."""

from __future__ import annotations

DEFAULT_TRACKING_PARAMS: tuple[str, ...] = (
    # Analytics campaign tags
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "utm_cpc",
    "utm_device",
    "utm_placement",
    "utm_network",
    # Ad network click IDs
    "gclid",
    "fbclid",
    "twclid",
    "msclkid",
    "dclid",
    "yclid",
    "wickedid",
    "mtm_source",
    "mtm_medium",
    # Email marketing
    "mc_cid",
    "mc_eid",
    "campaignid",
    "adgroupid",
    "mailtrack",
    "pk_campaign",
    "pk_kwd",
    # Affiliate / referral
    "ref",
    "referrer",
    "aff",
    "affiliate",
    "affiliate_id",
    # Session trackers
    "_ga",
    "_gl",
    "__hssc",
    "__hstc",
    "hsCtaTracking",
    # Ad platform metadata
    "ad_id",
    "ad_name",
    "adset_id",
    "adset_name",
    "campaign_id",
    # A/B testing
    "ab",
    "experiment",
    "variation",
    "test_group",
    # Misc
    "cid",
    "scid",
    "sid",
    "tap_a",
    "tap_s",
    "vgo_ee",
)


def is_tracking_param(name: str, tracking_params: tuple[str, ...] = DEFAULT_TRACKING_PARAMS) -> bool:
    """Return True if *name* exactly matches an entry of *tracking_params*.

    Matching is case-sensitive: ``"UTM_SOURCE"`` is not ``"utm_source"``.
    """
    return name in tracking_params
