import pytest

from valuegen.core.contracts import TypeExpression, normalize_type_text


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("i32", "i32"),
        ("Vec < u8 >", "Vec<u8>"),
        ("HashMap<K,V>", "HashMap<K, V>"),
        ("std :: string :: String", "std::string::String"),
        ("& 'static str", "&'static str"),
        ("[ u8 ; 4 ]", "[u8; 4]"),
        ("Box<dyn Fn(u8)->u8>", "Box<dyn Fn(u8) -> u8>"),
    ],
)
def test_normalize_type_text(raw, expected):
    assert normalize_type_text(raw) == expected


def test_type_expressions_compare_by_rendered_text():
    assert TypeExpression("Vec < u8 >") == TypeExpression("Vec<u8>")
    assert str(TypeExpression("Option< String >")) == "Option<String>"
