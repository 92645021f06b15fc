from __future__ import annotations

import random
import string

from services.fingerprint import fingerprint


def test_fingerprint_is_deterministic():
    url = "https://example.com/health?probe=1"

    assert fingerprint(url) == fingerprint(url)


def test_fingerprint_is_fixed_length_hex():
    for url in ("https://a.io", "https://example.com/" + "p" * 2000, ""):
        key = fingerprint(url)
        assert len(key) == 40
        assert set(key) <= set(string.hexdigits.lower())


def test_fingerprint_matches_sha1_of_url():
    assert fingerprint("https://example.com") == "327c3fda87ce286848a574982ddd0b7c7487f816"


def test_fingerprint_has_no_collisions_on_random_corpus():
    rng = random.Random(1234)
    alphabet = string.ascii_lowercase + string.digits
    urls = {
        "https://{}.example.com/{}?q={}".format(
            "".join(rng.choices(alphabet, k=8)),
            "".join(rng.choices(alphabet, k=12)),
            rng.randint(0, 10**9),
        )
        for _ in range(20000)
    }

    keys = {fingerprint(url) for url in urls}

    assert len(keys) == len(urls)
