def test_teacher_menu_links_to_teacher_registration(client) -> None:
    response = client.get('/admin/teacher')

    assert response.status_code == 200
    assert response.headers['content-type'].startswith('text/html')
    assert 'href="/admin/teacher/create"' in response.text
    assert 'Register New Teacher' in response.text
