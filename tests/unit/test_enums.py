from dextvl.domain.enums import Chain, CombineMode


class TestEnumsAreStringMixin:
    """All enums use (str, Enum) so they serialize to strings in SDK payloads."""

    def test_chain_is_str(self):
        assert isinstance(Chain.POLYGON, str)
        assert Chain.POLYGON == "polygon"

    def test_combine_mode_is_str(self):
        assert isinstance(CombineMode.CONCAT, str)
        assert CombineMode.SUM_BY_KEY == "SUM_BY_KEY"


class TestEnumCounts:
    """Verify expected member counts to catch accidental additions/removals."""

    def test_combine_mode_has_2(self):
        assert len(CombineMode) == 2

    def test_every_chain_has_platform_id(self):
        assert {chain.platform_id for chain in Chain} == {"ethereum", "polygon-pos", "binance-smart-chain"}
