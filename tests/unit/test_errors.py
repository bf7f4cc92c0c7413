"""Tests for the DEX error taxonomy."""

import pytest

from quoter.errors import (
    ContractError,
    DexErrorCode,
    DexReadError,
    InsufficientLiquidityError,
    InvalidAmountsError,
    InvalidPathError,
    MinimumNotMetError,
    NetworkError,
    PoolNotFoundError,
    ZeroLiquidityError,
    classify_errors,
)


class TestDexReadError:
    """Error codes and serialization."""

    @pytest.mark.parametrize(
        "cls,code",
        [
            (PoolNotFoundError, DexErrorCode.POOL_NOT_FOUND),
            (InsufficientLiquidityError, DexErrorCode.INSUFFICIENT_LIQUIDITY),
            (InvalidPathError, DexErrorCode.INVALID_PATH),
            (ContractError, DexErrorCode.CONTRACT_ERROR),
            (NetworkError, DexErrorCode.NETWORK_ERROR),
            (InvalidAmountsError, DexErrorCode.INVALID_AMOUNTS),
            (MinimumNotMetError, DexErrorCode.MINIMUM_NOT_MET),
            (ZeroLiquidityError, DexErrorCode.ZERO_LIQUIDITY),
        ],
    )
    def test_subclass_codes(self, cls, code):
        error = cls("message")
        assert error.code is code
        assert isinstance(error, DexReadError)

    def test_explicit_code_overrides(self):
        error = DexReadError("message", code=DexErrorCode.NETWORK_ERROR)
        assert error.code is DexErrorCode.NETWORK_ERROR

    def test_details_default_to_empty(self):
        assert PoolNotFoundError("gone").details == {}

    def test_to_dict_stringifies_integers(self):
        error = InsufficientLiquidityError(
            "too much",
            {"amount_out": 2**128 - 1, "pool_id": "1", "flag": True, "path": [1, "a"]},
        )
        assert error.to_dict() == {
            "code": "INSUFFICIENT_LIQUIDITY",
            "message": "too much",
            "details": {
                "amount_out": str(2**128 - 1),
                "pool_id": "1",
                "flag": True,
                "path": ["1", "a"],
            },
        }

    def test_str_is_message(self):
        assert str(NetworkError("down")) == "down"


class TestClassifyErrors:
    """classify_errors decorator."""

    @pytest.mark.asyncio
    async def test_passes_results_through(self):
        @classify_errors("Failed")
        async def op(x: int) -> int:
            return x * 2

        assert await op(21) == 42

    @pytest.mark.asyncio
    async def test_dex_errors_untouched(self):
        original = PoolNotFoundError("gone")

        @classify_errors("Failed")
        async def op() -> None:
            raise original

        with pytest.raises(PoolNotFoundError) as exc_info:
            await op()
        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_other_exceptions_become_contract_errors(self):
        @classify_errors("Failed to do the thing")
        async def op() -> None:
            raise KeyError("missing")

        with pytest.raises(ContractError, match="Failed to do the thing") as exc_info:
            await op()
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert "missing" in exc_info.value.details["cause"]

    def test_preserves_metadata(self):
        @classify_errors("Failed")
        async def documented() -> None:
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
