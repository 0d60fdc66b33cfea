import math

import pytest

from listadversary.perms import (
    Permutation,
    format_permutation,
    full_inverse,
    identity,
    inverse,
    inversion_count,
    iterate_permutations,
    lexindex,
    next_permutation,
    perm_from_index,
    recompute_alg_perm,
    swapped,
)

PERMS = [(0, 1, 2, 3), (0, 3, 2, 1), (2, 0, 3, 1), (3, 2, 1, 0)]


def test_lexindex_of_source_cases():
    assert [lexindex(p) for p in PERMS] == [0, 5, 13, 23]


def test_perm_from_index_round_trip_source_cases():
    for p in PERMS:
        assert perm_from_index(lexindex(p), 4) == p


def test_perm_from_index_all():
    for index in range(math.factorial(5)):
        assert lexindex(perm_from_index(index, 5)) == index


def test_perm_from_index_out_of_range():
    with pytest.raises(ValueError):
        perm_from_index(24, 4)


def test_swap_source_case():
    assert swapped((2, 0, 3, 1), 1) == (2, 3, 0, 1)
    assert swapped((2, 0, 3, 1), -1) == (2, 0, 3, 1)


def test_swap_out_of_range():
    with pytest.raises(IndexError):
        swapped((0, 1, 2), 2)


def test_recompute_alg_perm_source_case():
    opt = swapped(identity(4), 1)
    assert opt == (0, 2, 1, 3)
    assert recompute_alg_perm((3, 1, 2, 0), opt) == (3, 2, 1, 0)


def test_identity_and_full_inverse():
    assert identity(4) == (0, 1, 2, 3)
    assert full_inverse(4) == (3, 2, 1, 0)
    assert lexindex(full_inverse(4)) == math.factorial(4) - 1


def test_next_permutation_enumerates_in_order():
    perm = identity(4)
    seen = [perm]
    while (perm := next_permutation(perm)) is not None:
        seen.append(perm)
    assert seen == list(iterate_permutations(4))
    assert [lexindex(p) for p in seen] == list(range(24))
    assert next_permutation(full_inverse(4)) is None


def test_format_permutation():
    assert format_permutation((2, 0, 3, 1)) == "(2,0,3,1)"


def test_inverse_composes_to_identity():
    p = Permutation((2, 0, 3, 1))
    inv = Permutation(inverse(p.data))
    assert inv.data == (1, 3, 0, 2)
    assert p.compose_right(inv).data == identity(4)


def test_permutation_id_and_from_index():
    p = Permutation.from_index(13, 4)
    assert p.data == (2, 0, 3, 1)
    assert p.id() == 13
    assert str(p) == "13: (2,0,3,1)"


def test_permutation_swap_range():
    p = Permutation((0, 1, 2))
    assert p.swap(0).data == (1, 0, 2)
    with pytest.raises(ValueError):
        p.swap(2)


def test_mtf_and_move_forward():
    p = Permutation((2, 0, 3, 1))
    assert p.mtf(3).data == (3, 2, 0, 1)
    assert p.move_forward(1, 1).data == (2, 1, 0, 3)
    assert p.move_forward(2, 0).data == p.data
    assert p.move_from_position_to_position(1, 3).data == p.data


def test_position():
    p = Permutation((2, 0, 3, 1))
    assert p.position(3) == 2
    assert p.position(7) == -1


def test_inversions():
    assert Permutation(full_inverse(4)).inversions() == 6
    assert inversion_count(identity(4)) == 0
    p = Permutation((2, 0, 3, 1))
    assert p.inversions_wrt(p) == 0
    assert Permutation(identity(4)).inversions_wrt(p) == p.inversions()
    q = Permutation((3, 1, 0, 2))
    assert p.inversions_wrt(q) == q.inversions_wrt(p)