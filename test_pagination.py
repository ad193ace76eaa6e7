from pagination import Paginator, page_count_for


def test_page_count_for():
    assert page_count_for(0) == 1
    assert page_count_for(100) == 1
    assert page_count_for(101) == 2
    assert page_count_for(250, page_size=100) == 3


def test_go_to_page_rejects_out_of_range():
    paginator = Paginator(250)
    paginator.set_page(1)

    assert not paginator.go_to_page(3)
    assert not paginator.go_to_page(-1)
    assert paginator.page_index == 1
    assert paginator.go_to_page(2)
    assert (paginator.page_start, paginator.page_end) == (200, 250)


def test_shrinking_total_clamps_page():
    paginator = Paginator(250)
    paginator.last_page()

    paginator.update_total_rows(120)

    assert paginator.page_index == 1


def test_next_and_prev_stop_at_edges():
    paginator = Paginator(150)
    paginator.prev_page()
    assert paginator.page_index == 0

    paginator.next_page()
    paginator.next_page()
    assert paginator.page_index == 1


def test_ensure_row_visible():
    paginator = Paginator(350)

    paginator.ensure_row_visible(299)

    assert paginator.page_index == 2
