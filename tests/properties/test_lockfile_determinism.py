"""Property-based tests for lockfile determinism and read-back fidelity.

Verifies that lockfile serialization is:
- Deterministic: same entries in any order -> same YAML bytes
- Faithful: write -> read yields an equal lockfile
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from vimflavor.core.flavor import LockedFlavor
from vimflavor.core.lockfile import Lockfile
from vimflavor.core.version import Version

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

name_parts = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz-"),
    min_size=1,
    max_size=12,
).filter(lambda s: not s.startswith("-"))

repo_names = st.tuples(name_parts, name_parts).map(lambda parts: "/".join(parts))

versions = st.tuples(
    st.sampled_from(["", "v"]),
    st.lists(st.integers(min_value=0, max_value=99), min_size=1, max_size=4),
).map(lambda t: t[0] + ".".join(map(str, t[1])))

groups = st.lists(
    st.sampled_from(["default", "development", "test"]), min_size=1, max_size=3
)

constraints = st.sampled_from([">= 0", "~> 1.2", "~> 1.2.3", "== 2.0", ">= 0.5"])


@st.composite
def locked_flavor_strategy(draw: st.DrawFn) -> LockedFlavor:
    name = draw(repo_names)
    return LockedFlavor(
        repo_name=name,
        repo_uri=f"https://github.com/{name}.git",
        groups=tuple(draw(groups)),
        version_constraint=draw(constraints),
        locked_version=Version.parse(draw(versions)),
    )


entries = st.lists(
    locked_flavor_strategy(), max_size=6, unique_by=lambda f: f.repo_uri
)


class TestLockfileDeterminism:
    """Same lockfile contents produce byte-identical YAML output."""

    @given(flavors=entries, data=st.data())
    @settings(max_examples=50)
    def test_insertion_order_irrelevant(self, flavors: list[LockedFlavor], data) -> None:
        shuffled = data.draw(st.permutations(flavors))
        assert Lockfile(flavors).to_yaml() == Lockfile(list(shuffled)).to_yaml()

    @given(flavors=entries)
    @settings(max_examples=50)
    def test_read_back_equal(self, flavors: list[LockedFlavor]) -> None:
        original = Lockfile(flavors)
        reread = Lockfile.from_yaml(original.to_yaml())
        assert reread == original
        assert reread.to_yaml() == original.to_yaml()
