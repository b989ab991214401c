import random

import pytest

from tpccbench import rand
from tpccbench.rand import (
    convert_to_pq,
    rand_c_last,
    rand_c_last_syllables,
    rand_chars,
    rand_customer_id,
    rand_int,
    rand_item_id,
    rand_letters,
    rand_numbers,
    rand_original_string,
    rand_state,
    rand_tax,
    rand_zip,
)


def test_convert_to_pq_numbers_placeholders():
    assert convert_to_pq("a = ? AND b = ? AND c = ?", "postgres") == "a = $1 AND b = $2 AND c = $3"


def test_convert_to_pq_leaves_mysql_alone():
    query = "SELECT * FROM t WHERE a = ?"
    assert convert_to_pq(query, "mysql") == query


def test_convert_to_pq_without_placeholders():
    assert convert_to_pq("SELECT 1", "postgres") == "SELECT 1"


def test_rand_int_bounds():
    r = random.Random(3)
    values = {rand_int(r, 5, 15) for _ in range(2000)}
    assert values == set(range(5, 16))


def test_rand_int_equal_bounds():
    assert rand_int(random.Random(), 4, 4) == 4


def test_rand_int_rejects_inverted_range():
    with pytest.raises(ValueError):
        rand_int(random.Random(), 10, 1)


def test_rand_chars_length_and_alphabet():
    r = random.Random(1)
    for _ in range(100):
        text = rand_chars(r, 10, 20)
        assert 10 <= len(text) <= 20
        assert set(text) <= set(rand.CHARACTERS)


def test_rand_letters_and_numbers():
    r = random.Random(2)
    letters = rand_letters(r, 24, 24)
    numbers = rand_numbers(r, 16, 16)
    assert len(letters) == 24 and letters.isalpha() and letters.isupper()
    assert len(numbers) == 16 and numbers.isdigit()


def test_rand_zip_shape():
    r = random.Random(4)
    for _ in range(50):
        zip_code = rand_zip(r)
        assert len(zip_code) == 9
        assert zip_code.endswith("11111")
        assert zip_code.isdigit()


def test_rand_state_shape():
    state = rand_state(random.Random(5))
    assert len(state) == 2 and set(state) <= set(rand.LETTERS)


def test_rand_tax_range():
    r = random.Random(6)
    assert all(0.0 <= rand_tax(r) <= 0.2 for _ in range(500))


def test_rand_original_string():
    r = random.Random(7)
    texts = [rand_original_string(r) for _ in range(300)]
    assert all(26 <= len(t) <= 50 for t in texts)
    assert any(rand.ORIGINAL_STRING in t for t in texts)


def test_c_last_syllables_examples():
    assert rand_c_last_syllables(371) == "PRICALLYOUGHT"
    assert rand_c_last_syllables(0) == "BARBARBAR"


def test_c_last_syllables_out_of_range():
    with pytest.raises(ValueError):
        rand_c_last_syllables(1000)
    with pytest.raises(ValueError):
        rand_c_last_syllables(-1)


def test_rand_c_last_is_a_valid_name():
    names = {rand_c_last_syllables(n) for n in range(1000)}
    r = random.Random(8)
    assert all(rand_c_last(r) in names for _ in range(200))


def test_rand_customer_and_item_ids():
    r = random.Random(9)
    assert all(1 <= rand_customer_id(r) <= 3000 for _ in range(1000))
    assert all(1 <= rand_item_id(r) <= 100000 for _ in range(1000))


def test_same_seed_same_ids():
    a = [rand_item_id(random.Random(11)) for _ in range(3)]
    b = [rand_item_id(random.Random(11)) for _ in range(3)]
    assert a == b