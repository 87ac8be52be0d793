def test_stats_on_empty_database(client):
    response = client.get("/api/admin/stats")

    assert response.status_code == 200
    assert response.json() == {"faculty": 0, "subjects": 0, "classrooms": 0, "timeslots": 0, "timetables": 0}


def test_stats_count_active_catalogue_and_all_timetables(client, seeded_department):
    response = client.get("/api/admin/stats")

    assert response.status_code == 200
    # Inactive faculty and rooms are excluded; subjects from every semester count.
    assert response.json() == {"faculty": 3, "subjects": 4, "classrooms": 3, "timeslots": 6, "timetables": 0}

    generated = client.post(
        "/api/admin/generate-timetable",
        json={
            "academic_year": "2025-26",
            "semester": 3,
            "department": "Computer Science",
            "settings_override": {"population_size": 10, "max_generations": 4, "stagnation_limit": 2, "random_seed": 3},
        },
    )
    assert generated.status_code == 201, generated.text

    assert client.get("/api/admin/stats").json()["timetables"] == 1
