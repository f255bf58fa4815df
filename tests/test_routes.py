from io import BytesIO

import pandas as pd
import pytest

from breedcalc import create_app
from .fixtures import BULL_FULL_SIB, BULL_SHARED_GREAT_GRANDPARENTS, COW_DEEP, FULL_SIBS


@pytest.fixture
def client():
    app = create_app({"TESTING": True, "BREEDCALC_MEMO_SCOPE": "unit"})
    return app.test_client()


def test_index(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "breedcalc" in response.get_json()["message"]


def test_inbreeding_json(client):
    response = client.post("/api/inbreeding", json={
        "subject": COW_DEEP,
        "partners": [BULL_FULL_SIB, BULL_SHARED_GREAT_GRANDPARENTS],
        "options": {"path_mode": "independent"},
        "rank": True,
    })
    assert response.status_code == 200
    results = response.get_json()["results"]
    assert [(r["partnerId"], r["coefficient"]) for r in results] == [("51", 0.0625), ("50", 0.25)]
    assert {r["mode"] for r in results} == {"independent"}


def test_inbreeding_empty_partners_is_best_effort(client):
    response = client.post("/api/inbreeding", json={"subject": FULL_SIBS[0], "partners": []})
    assert response.status_code == 200
    assert response.get_json() == {"results": []}


def test_inbreeding_rejects_non_json(client):
    response = client.post("/api/inbreeding", data="subject=A", content_type="text/plain")
    assert response.status_code == 400


def test_inbreeding_rejects_unknown_option(client):
    response = client.post("/api/inbreeding", json={
        "subject": FULL_SIBS[0],
        "partners": [FULL_SIBS[1]],
        "options": {"path_mode": "fastest"},
    })
    assert response.status_code == 400
    assert "fastest" in response.get_json()["error"]


def test_memo_scope_is_not_a_request_option(client):
    response = client.post("/api/inbreeding", json={
        "subject": FULL_SIBS[0],
        "partners": [FULL_SIBS[1]],
        "options": {"memo_scope": "bogus"},
    })
    # ignored, the app config decides
    assert response.status_code == 200
    assert response.get_json()["results"][0]["coefficient"] == 0.25


CSV = (
    "ID,Sire,Dam,Sire Sire\n"
    "A,S,D,\n"
    "B,S,D,\n"
    "C,X,,S\n"
    ",S,D,\n"
)


def _upload(client, subject_id, text=CSV, **form):
    data = {"pedigree_file": (BytesIO(text.encode()), "records.csv"), "subject_id": subject_id}
    data.update(form)
    return client.post("/api/inbreeding/upload", data=data, content_type="multipart/form-data")


def test_upload(client):
    response = _upload(client, "A")
    assert response.status_code == 200
    results = response.get_json()["results"]
    assert [(r["partnerId"], r["coefficient"]) for r in results] == [("B", 0.25), ("C", 0.0625)]


def test_upload_ranked_with_form_options(client):
    response = _upload(client, "A", rank="true", unit="pair")
    results = response.get_json()["results"]
    assert [r["partnerId"] for r in results] == ["C", "B"]


def test_upload_unknown_subject(client):
    response = _upload(client, "Q")
    assert response.status_code == 400


def test_upload_missing_file(client):
    response = client.post("/api/inbreeding/upload", data={"subject_id": "A"},
                           content_type="multipart/form-data")
    assert response.status_code == 400


def test_upload_missing_id_column(client):
    response = _upload(client, "A", text="sire,dam\nS,D\n")
    assert response.status_code == 400
    assert "id" in response.get_json()["error"]


def test_export(client):
    response = client.post("/api/inbreeding/export", json={
        "subject": FULL_SIBS[0],
        "partners": [FULL_SIBS[1]],
    })
    assert response.status_code == 200
    assert response.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    df = pd.read_excel(BytesIO(response.data), sheet_name="Mating Results", dtype={"Subject ID": str, "Partner ID": str})
    assert df.loc[0, "Subject ID"] == "A"
    assert df.loc[0, "Partner ID"] == "B"
    assert df.loc[0, "Expected Offspring F"] == 0.25
