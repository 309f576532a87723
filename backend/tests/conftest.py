"""Shared pytest fixtures for golaycodec tests."""

import numpy as np
import pytest

from golaycodec.fec import golay


@pytest.fixture
def all_ones_codeword() -> int:
    """Codeword of data 0xFFF (all 23 bits set)."""
    return golay.golay_encode(0xFFF)


@pytest.fixture
def table_missing_syndrome(monkeypatch):
    """Syndrome table with syndrome 0x001 (position 22) knocked out.

    The real table covers every nonzero syndrome, so this is the only way to
    drive the uncorrectable paths. Returns the removed syndrome.
    """
    table = golay.get_syndrome_table()
    target = golay.golay_syndrome(1)
    masks = list(table.masks)
    weights = list(table.weights)
    masks[target] = 0
    weights[target] = -1
    broken = golay.SyndromeTable(
        masks=tuple(masks),
        weights=tuple(weights),
        mask_array=np.array(masks, dtype=np.int64),
        weight_array=np.array(weights, dtype=np.int64),
    )
    monkeypatch.setattr(golay, "get_syndrome_table", lambda: broken)
    return target
