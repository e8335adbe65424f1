"""Unit tests for attaching scores to generations."""

from genquery.enrichment import attach_scores, fetch_scores


def _score(id_, observation_id, project_id="proj_1"):
    return {"id": id_, "observationId": observation_id, "projectId": project_id}


def test_each_row_gets_exactly_its_scores():
    """Test every row gets the scores with its id, in fetch order."""
    rows = [{"id": "g1"}, {"id": "g2"}, {"id": "g3"}]
    scores = [_score("s1", "g1"), _score("s2", "g3"), _score("s3", "g1")]
    out = attach_scores(rows, scores)
    assert [s["id"] for s in out[0]["scores"]] == ["s1", "s3"]
    assert out[1]["scores"] == []
    assert [s["id"] for s in out[2]["scores"]] == ["s2"]


def test_rows_are_copied_not_mutated():
    rows = [{"id": "g1"}]
    out = attach_scores(rows, [])
    assert "scores" not in rows[0]
    assert out == [{"id": "g1", "scores": []}]


def test_scores_for_unknown_rows_are_ignored():
    out = attach_scores([{"id": "g1"}], [_score("s1", "gX")])
    assert out[0]["scores"] == []


def test_other_tenant_scores_never_attach():
    """Test a score from another project is dropped even when ids collide."""
    rows = [{"id": "g1"}]
    scores = [_score("s1", "g1", "proj_1"), _score("s2", "g1", "proj_2")]
    out = attach_scores(rows, scores, project_id="proj_1")
    assert [s["id"] for s in out[0]["scores"]] == ["s1"]


def test_fetch_skips_query_without_ids(make_conn):
    """Test an empty page issues no scores query."""
    conn = make_conn()
    assert fetch_scores(conn, "proj_1", []) == []
    assert conn.executed == []


def test_fetch_scopes_to_project_and_ids(make_conn):
    """Test the scores query is tenant scoped and binds the id list."""
    conn = make_conn([_score("s1", "g1")])
    rows = fetch_scores(conn, "proj_1", ["g1", "g2", "g1"])
    assert rows == [_score("s1", "g1")]
    sql, params = conn.executed[0]
    assert "t.project_id = %(project_id)s" in sql
    assert "s.observation_id = ANY(%(observation_ids)s)" in sql
    assert params == {"project_id": "proj_1", "observation_ids": ["g1", "g2"]}
