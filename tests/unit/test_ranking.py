"""Unit tests for CentralityRanker and the Top-N Selector."""

from __future__ import annotations

import math

import pytest

from src.models.artist import ArtistKind
from src.models.graph import ArtistGraph
from src.services.centrality_ranker import CentralityRanker
from src.services.top_n_selector import select_top
from src.utils.errors import RankingError
from tests.conftest import make_artist


def _star(center: str, leaves: list[str]) -> ArtistGraph:
    graph = ArtistGraph()
    graph.add_node(make_artist(center, kind=ArtistKind.SEED))
    for leaf in leaves:
        graph.add_node(make_artist(leaf))
        graph.add_edge(center, leaf)
    return graph


# ======================================================================
# CentralityRanker
# ======================================================================


class TestCentralityRanker:
    def test_empty_graph(self) -> None:
        assert CentralityRanker().rank(ArtistGraph()) == {}

    def test_single_node(self) -> None:
        graph = ArtistGraph()
        graph.add_node(make_artist("a"))
        assert CentralityRanker().rank(graph) == {"a": 1.0}

    def test_scores_sum_to_one(self) -> None:
        graph = _star("s", ["b", "c", "d"])
        graph.add_node(make_artist("e"))
        graph.add_edge("b", "e")

        scores = CentralityRanker().rank(graph)

        assert set(scores) == {"s", "b", "c", "d", "e"}
        assert sum(scores.values()) == pytest.approx(1.0, abs=1e-6)
        assert all(score >= 0 for score in scores.values())

    def test_isolated_node_keeps_positive_score(self) -> None:
        graph = _star("s", ["b", "c"])
        graph.add_node(make_artist("lonely"))

        scores = CentralityRanker().rank(graph)

        assert scores["lonely"] > 0
        assert scores["lonely"] < scores["s"]
        assert sum(scores.values()) == pytest.approx(1.0, abs=1e-6)

    def test_star_leaves_tie_and_center_wins(self) -> None:
        scores = CentralityRanker().rank(_star("s", ["b", "c", "d"]))

        assert scores["b"] == pytest.approx(scores["c"])
        assert scores["c"] == pytest.approx(scores["d"])
        assert scores["s"] > scores["b"]

    def test_adding_edge_raises_target_score(self) -> None:
        graph = _star("s", ["b", "c", "d"])
        graph.add_node(make_artist("e"))
        graph.add_edge("b", "e")
        before = CentralityRanker().rank(graph)["c"]

        graph.add_edge("b", "c")
        after = CentralityRanker().rank(graph)["c"]

        assert after > before

    def test_zero_damping_is_uniform(self) -> None:
        scores = CentralityRanker(damping=0.0).rank(_star("s", ["b", "c", "d"]))
        for score in scores.values():
            assert score == pytest.approx(0.25)

    def test_non_convergence_raises_ranking_error(self) -> None:
        ranker = CentralityRanker(max_iter=1, tol=1e-15)
        with pytest.raises(RankingError):
            ranker.rank(_star("s", ["b", "c", "d"]))

    @pytest.mark.parametrize("damping", [-0.1, 1.0, 1.5])
    def test_invalid_damping(self, damping: float) -> None:
        with pytest.raises(ValueError):
            CentralityRanker(damping=damping)


# ======================================================================
# Top-N Selector
# ======================================================================


class TestSelectTop:
    def test_excludes_seeds_and_orders_by_score(self) -> None:
        graph = _star("s", ["b", "c", "d"])
        scores = {"s": 0.5, "b": 0.1, "c": 0.3, "d": 0.1}

        result = select_top(graph, scores, {"s"}, n=5)

        assert [r.artist_id for r in result] == ["c", "b", "d"]
        assert result[0].score == 0.3
        assert result[0].display_name == "C"

    def test_ties_break_by_discovery_order(self) -> None:
        graph = _star("s", ["z", "y", "x"])
        scores = {"s": 0.4, "z": 0.2, "y": 0.2 + 1e-15, "x": 0.2}

        result = select_top(graph, scores, {"s"})

        assert [r.artist_id for r in result] == ["z", "y", "x"]

    def test_near_equal_scores_across_rounding_boundary_tie(self) -> None:
        first = 0.1234567890125
        second = math.nextafter(first, 1.0)
        graph = _star("s", ["first", "second", "low"])
        scores = {"s": 0.5, "first": first, "second": second, "low": 0.1}

        result = select_top(graph, scores, {"s"})

        assert [r.artist_id for r in result] == ["first", "second", "low"]
        assert result[1].score == second

    def test_caps_at_n(self) -> None:
        graph = _star("s", [f"r{i}" for i in range(8)])
        scores = {artist_id: 0.1 for artist_id in graph.node_ids()}

        assert len(select_top(graph, scores, {"s"}, n=5)) == 5
        assert select_top(graph, scores, {"s"}, n=0) == []

    def test_fewer_candidates_than_n(self) -> None:
        graph = _star("s", ["b"])
        result = select_top(graph, {"s": 0.5, "b": 0.5}, {"s"}, n=5)
        assert [r.artist_id for r in result] == ["b"]

    def test_only_seeds_yields_empty(self) -> None:
        graph = ArtistGraph()
        graph.add_node(make_artist("s", kind=ArtistKind.SEED))
        assert select_top(graph, {"s": 1.0}, {"s"}) == []

    def test_negative_n_rejected(self) -> None:
        with pytest.raises(ValueError):
            select_top(ArtistGraph(), {}, set(), n=-1)
