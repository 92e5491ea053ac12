from bookverse.utils.pagination import get_offset, paginate


class TestPaginate:
    def test_partial_last_page(self):
        result = paginate(2, 20, 45)
        assert result.model_dump() == {"page": 2, "limit": 20, "total": 45, "pages": 3}

    def test_exact_multiple(self):
        assert paginate(1, 10, 30).pages == 3

    def test_no_rows(self):
        assert paginate(1, 20, 0).pages == 0

    def test_non_positive_limit(self):
        assert paginate(1, 0, 5).pages == 0
        assert paginate(1, -3, 5).pages == 0

    def test_no_upper_bound_on_limit(self):
        assert paginate(1, 10_000, 45).pages == 1


class TestOffset:
    def test_first_page(self):
        assert get_offset(1, 20) == 0

    def test_later_page(self):
        assert get_offset(3, 10) == 20
