"""
Tests de configuración de horarios por espacio y fecha.
"""

from datetime import time

from sqlalchemy import select

from agenda.models.schedule_config import ConfiguracionHorario
from agenda.models.space import Espacio
from agenda.models.user import User
from tests.helpers import auth_headers

API = "/api/v1/configuracion-horarios"


async def _save(client, admin: User, espacio: Espacio, **body):
    payload = {"espacio_id": espacio.id, "fecha": "2026-03-10", **body}
    return await client.post(API, json=payload, headers=auth_headers(admin))


async def test_default_schedule_without_configuration(
    client, paciente_user: User, espacio: Espacio
):
    response = await client.get(
        API,
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(paciente_user),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["es_horario_default"] is True
    assert (body["hora_inicio"], body["hora_fin"]) == (7, 18)
    assert body["horas"] == [f"{h:02d}:00" for h in range(7, 18)]
    assert body["horas_deshabilitadas"] == []


async def test_default_schedule_without_space(client, paciente_user: User):
    response = await client.get(
        API, params={"fecha": "2026-03-10"}, headers=auth_headers(paciente_user)
    )
    assert response.status_code == 200
    assert response.json()["espacio_id"] is None
    assert response.json()["es_horario_default"] is True


async def test_save_switches_day_to_half_hour_grid(
    client, admin_user: User, espacio: Espacio
):
    response = await _save(
        client, admin_user, espacio,
        hora_inicio=9, hora_fin=11,
        horas_deshabilitadas=["10:00", "09:30", "10:00"],
        motivo="Mantenimiento",
    )
    assert response.status_code == 200
    body = response.json()
    assert body["es_horario_default"] is False
    assert body["horas"] == ["09:00", "09:30", "10:00", "10:30", "11:00"]
    assert body["horas_deshabilitadas"] == ["09:30", "10:00"]
    assert body["motivo"] == "Mantenimiento"

    disponibles = await client.get(
        f"{API}/horarios-disponibles",
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(admin_user),
    )
    assert disponibles.json()["horas"] == ["09:00", "10:30", "11:00"]


async def test_save_replaces_previous_configuration(
    client, admin_user: User, espacio: Espacio
):
    await _save(client, admin_user, espacio, horas_deshabilitadas=["08:00"])
    await _save(client, admin_user, espacio, horas_deshabilitadas=["12:00"])

    response = await client.get(
        API,
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(admin_user),
    )
    assert response.json()["horas_deshabilitadas"] == ["12:00"]

    logs = await client.get(
        "/api/v1/auditoria",
        params={"entity": "configuracion_horario"},
        headers=auth_headers(admin_user),
    )
    assert [item["action"] for item in logs.json()["items"]] == ["update", "create"]
    assert logs.json()["items"][0]["old_data"]["horas_deshabilitadas"] == ["08:00"]


async def test_empty_list_still_marks_special_configuration(
    client, admin_user: User, espacio: Espacio
):
    params = {"fecha": "2026-03-10", "espacio_id": espacio.id}
    headers = auth_headers(admin_user)

    before = await client.get(f"{API}/configuracion-especial", params=params, headers=headers)
    assert before.json()["tiene_configuracion_especial"] is False

    await _save(client, admin_user, espacio, horas_deshabilitadas=[])

    after = await client.get(f"{API}/configuracion-especial", params=params, headers=headers)
    assert after.json()["tiene_configuracion_especial"] is True

    config = await client.get(API, params=params, headers=headers)
    assert config.json()["es_horario_default"] is False
    assert len(config.json()["horas"]) == 23


async def test_configuration_is_per_day_and_space(
    client, admin_user: User, espacio: Espacio, espacio_2: Espacio
):
    await _save(client, admin_user, espacio, horas_deshabilitadas=["09:00"])
    headers = auth_headers(admin_user)

    otro_espacio = await client.get(
        API, params={"fecha": "2026-03-10", "espacio_id": espacio_2.id}, headers=headers
    )
    otro_dia = await client.get(
        API, params={"fecha": "2026-03-11", "espacio_id": espacio.id}, headers=headers
    )
    assert otro_espacio.json()["es_horario_default"] is True
    assert otro_dia.json()["es_horario_default"] is True


async def test_invalid_payloads(client, admin_user: User, espacio: Espacio):
    malformed = await _save(client, admin_user, espacio, horas_deshabilitadas=["9h"])
    inverted = await _save(client, admin_user, espacio, hora_inicio=12, hora_fin=9)
    assert malformed.status_code == 422
    assert inverted.status_code == 422


async def test_unpadded_labels_are_stored_as_grid_labels(
    client, db_session, admin_user: User, espacio: Espacio
):
    response = await _save(client, admin_user, espacio, horas_deshabilitadas=["9:00", "09:00"])
    assert response.status_code == 200
    assert response.json()["horas_deshabilitadas"] == ["09:00"]

    row = (await db_session.execute(select(ConfiguracionHorario))).scalar_one()
    assert row.horas_deshabilitadas == ["09:00"]

    disponibles = await client.get(
        f"{API}/horarios-disponibles",
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(admin_user),
    )
    assert "09:00" not in disponibles.json()["horas"]


async def test_single_bound_cannot_invert_the_day(client, admin_user: User, espacio: Espacio):
    # Con los límites por defecto 7-18
    apertura_tardia = await _save(client, admin_user, espacio, hora_inicio=19)
    cierre_temprano = await _save(client, admin_user, espacio, hora_fin=5)
    assert apertura_tardia.status_code == 422
    assert cierre_temprano.status_code == 422

    config = await client.get(
        API,
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(admin_user),
    )
    assert config.json()["es_horario_default"] is True


async def test_single_bound_within_defaults(client, admin_user: User, espacio: Espacio):
    response = await _save(client, admin_user, espacio, hora_inicio=16)
    assert response.status_code == 200
    assert response.json()["horas"] == ["16:00", "16:30", "17:00", "17:30", "18:00"]


async def test_disabled_labels_must_belong_to_the_day(
    client, admin_user: User, espacio: Espacio
):
    response = await _save(
        client, admin_user, espacio,
        hora_inicio=9, hora_fin=12,
        horas_deshabilitadas=["09:30", "03:15", "20:00"],
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Horas fuera del horario del día: 03:15, 20:00"

    stored = await client.get(
        f"{API}/configuracion-especial",
        params={"fecha": "2026-03-10", "espacio_id": espacio.id},
        headers=auth_headers(admin_user),
    )
    assert stored.json()["tiene_configuracion_especial"] is False


async def test_save_for_missing_space(client, admin_user: User, setup_database):
    response = await client.post(
        API,
        json={"espacio_id": 999, "fecha": "2026-03-10"},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 404


async def test_only_admin_configures(client, terapeuta_user: User, espacio: Espacio):
    response = await _save(client, terapeuta_user, espacio, horas_deshabilitadas=["09:00"])
    assert response.status_code == 403


async def test_delete_returns_day_to_default(client, admin_user: User, espacio: Espacio):
    params = {"fecha": "2026-03-10", "espacio_id": espacio.id}
    headers = auth_headers(admin_user)

    missing = await client.delete(API, params=params, headers=headers)
    assert missing.status_code == 404

    await _save(client, admin_user, espacio, horas_deshabilitadas=["09:00"])
    deleted = await client.delete(API, params=params, headers=headers)
    assert deleted.status_code == 204

    config = await client.get(API, params=params, headers=headers)
    assert config.json()["es_horario_default"] is True


class TestDisponibilidad:
    async def test_free_interval(self, client, paciente_user: User, espacio: Espacio, make_cita):
        await make_cita(espacio, time(9, 0), time(10, 0))
        response = await client.get(
            f"{API}/disponibilidad",
            params={
                "espacio_id": espacio.id,
                "fecha": "2026-03-10",
                "hora_inicio": "10:00",
                "hora_fin": "11:00",
            },
            headers=auth_headers(paciente_user),
        )
        assert response.status_code == 200
        assert response.json() == {"disponible": True, "conflicto": None}

    async def test_occupied_interval_reports_conflict(
        self, client, paciente_user: User, espacio: Espacio, make_cita
    ):
        cita = await make_cita(espacio, time(9, 0), time(10, 0))
        params = {
            "espacio_id": espacio.id,
            "fecha": "2026-03-10",
            "hora_inicio": "09:30",
            "hora_fin": "10:30",
        }
        headers = auth_headers(paciente_user)

        response = await client.get(f"{API}/disponibilidad", params=params, headers=headers)
        assert response.json()["disponible"] is False
        assert response.json()["conflicto"] == {
            "id": str(cita.id),
            "paciente_nombre": "Ana López",
            "hora_inicio": "09:00",
            "hora_fin": "10:00",
        }

        excluded = await client.get(
            f"{API}/disponibilidad",
            params={**params, "excluir_cita_id": cita.id},
            headers=headers,
        )
        assert excluded.json()["disponible"] is True

    async def test_inverted_interval(self, client, paciente_user: User, espacio: Espacio):
        response = await client.get(
            f"{API}/disponibilidad",
            params={
                "espacio_id": espacio.id,
                "fecha": "2026-03-10",
                "hora_inicio": "11:00",
                "hora_fin": "10:00",
            },
            headers=auth_headers(paciente_user),
        )
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "EndNotAfterStart"
