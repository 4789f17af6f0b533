from menuplanner import constants
from menuplanner.services import AuthService


def test_content_endpoints_need_an_api_key(client):
    res = client.get('/api/v1/recipes')
    assert res.status_code == 401
    assert res.get_json()['code'] == constants.E_UNAUTHORIZED

    res = client.get('/api/v1/recipes', headers={'Authorization': 'Bearer not-a-key'})
    assert res.status_code == 403
    assert res.get_json() == {
        'code': constants.E_USER_AUTH_FAILED,
        'message': constants.E_USER_AUTH_FAILED_MSG,
        'data': None,
    }


def test_non_numeric_id_is_rejected(client, headers):
    for url in ('/api/v1/recipes/abc', '/api/v1/categories/1.5', '/api/v1/menus/x', '/api/v1/recipes/abc/menus'):
        res = client.get(url, headers=headers)
        assert res.status_code == 400, url
        assert res.get_json()['code'] == constants.E_ID_NAN


def test_recipe_lifecycle(client, headers):
    cats = [client.post('/api/v1/categories', json={'name': name}, headers=headers).get_json()['data']
            for name in ('Soup', 'Winter')]

    res = client.post('/api/v1/recipes', headers=headers, json={
        'name': 'Soup',
        'link': 'https://example.org/soup',
        'categories': [{'id': cats[0]['id']}, {'id': cats[1]['id']}],
    })
    assert res.status_code == 201
    recipe = res.get_json()['data']
    assert recipe['deleted'] is False

    res = client.get(f"/api/v1/recipes/{recipe['id']}/categories", headers=headers)
    assert [c['name'] for c in res.get_json()['data']] == ['Soup', 'Winter']

    res = client.get(f"/api/v1/recipes?cat={cats[0]['id']}&cat={cats[1]['id']}", headers=headers)
    assert [r['id'] for r in res.get_json()['data']] == [recipe['id']]

    res = client.put(f"/api/v1/recipes/{recipe['id']}", headers=headers,
                     json={'comment': 'Serve hot', 'categories': [cats[1]['id']]})
    assert res.status_code == 200
    body = res.get_json()['data']
    assert body['comment'] == 'Serve hot'
    assert body['link'] == 'https://example.org/soup'

    res = client.get(f"/api/v1/categories/{cats[0]['id']}/recipes", headers=headers)
    assert res.get_json()['data'] == []

    res = client.delete(f"/api/v1/recipes/{recipe['id']}", headers=headers)
    assert res.status_code == 200
    assert res.get_json()['data'] == 1

    res = client.get('/api/v1/recipes', headers=headers)
    assert res.status_code == 200
    assert res.get_json()['code'] == constants.E_NOTFOUND
    assert res.get_json()['data'] == []

    res = client.get('/api/v1/recipes?include_deleted=true', headers=headers)
    assert [(r['id'], r['deleted']) for r in res.get_json()['data']] == [(recipe['id'], True)]


def test_recipe_validation_errors(client, headers):
    res = client.post('/api/v1/recipes', headers=headers, json={'link': 'x'})
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_NAME_REQ

    res = client.post('/api/v1/recipes', headers=headers, json={'name': 'Soup', 'categories': [12]})
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_INVALIDDATA

    # the failed create left nothing behind
    res = client.get('/api/v1/recipes', headers=headers)
    assert res.get_json()['data'] == []

    res = client.get('/api/v1/recipes/7', headers=headers)
    assert res.status_code == 404
    assert res.get_json()['code'] == constants.E_NOTFOUND

    res = client.get('/api/v1/recipes?limit=-1', headers=headers)
    assert res.status_code == 400


def test_category_crud(client, headers):
    res = client.post('/api/v1/categories', json={'name': 'Dessert'}, headers=headers)
    assert res.status_code == 201
    category = res.get_json()['data']

    res = client.post('/api/v1/categories', json={'name': 'Dessert'}, headers=headers)
    assert res.status_code == 400
    assert res.get_json() == {
        'code': constants.E_DUPLICATE,
        'message': constants.E_DUPLICATE_MSG,
        'data': None,
    }

    res = client.put(f"/api/v1/categories/{category['id']}", json={'name': 'Sweets'}, headers=headers)
    assert res.get_json()['data']['name'] == 'Sweets'

    res = client.get('/api/v1/categories?name=swe', headers=headers)
    assert [c['name'] for c in res.get_json()['data']] == ['Sweets']

    client.post('/api/v1/recipes', json={'name': 'Cake', 'categories': [category['id']]}, headers=headers)

    res = client.delete(f"/api/v1/categories/{category['id']}", headers=headers)
    assert res.status_code == 200

    res = client.delete(f"/api/v1/categories/{category['id']}", headers=headers)
    assert res.status_code == 404

    res = client.put('/api/v1/categories/99', json={'name': 'Nope'}, headers=headers)
    assert res.status_code == 404


def test_menus_by_date(client, headers):
    recipes = [client.post('/api/v1/recipes', json={'name': name}, headers=headers).get_json()['data']['id']
               for name in ('Pasta', 'Salad')]

    res = client.post('/api/v1/menus', json={'date': '2024-01-01', 'recipes': recipes}, headers=headers)
    assert res.status_code == 201
    menu = res.get_json()['data']

    res = client.get('/api/v1/menus/date/2024-01-01', headers=headers)
    body = res.get_json()['data']
    assert body['id'] == menu['id']
    assert body['date'] == '2024-01-01'
    assert body['comment'] is None
    assert [r['id'] for r in body['recipes']] == recipes

    res = client.get('/api/v1/menus/date/2024-01-02', headers=headers)
    assert res.status_code == 200
    assert res.get_json()['data'] == {}

    res = client.get('/api/v1/menus/date/not-a-date', headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_NOTDATE

    res = client.get(f"/api/v1/recipes/{recipes[0]}/menus", headers=headers)
    assert [m['id'] for m in res.get_json()['data']] == [menu['id']]

    res = client.get('/api/v1/menus?after=2023-12-31&before=2024-01-01', headers=headers)
    assert [m['id'] for m in res.get_json()['data']] == [menu['id']]

    res = client.put(f"/api/v1/menus/{menu['id']}", json={'comment': 'Brunch', 'recipes': [recipes[1]]}, headers=headers)
    assert res.get_json()['data']['comment'] == 'Brunch'
    assert [r['id'] for r in res.get_json()['data']['recipes']] == [recipes[1]]

    res = client.delete(f"/api/v1/menus/{menu['id']}", headers=headers)
    assert res.status_code == 200
    res = client.get(f"/api/v1/menus/{menu['id']}", headers=headers)
    assert res.status_code == 404


def test_menu_requires_a_valid_date(client, headers):
    res = client.post('/api/v1/menus', json={'comment': 'no date'}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_INFOMISSING

    res = client.post('/api/v1/menus', json={'date': '31/01/2024'}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_NOTDATE


def test_login_and_user_administration(client, session):
    AuthService.create_user(session, 'Admin', 'admin', 'changeme', admin=True)

    res = client.post('/api/v1/auth/login', json={'username': 'admin', 'password': 'nope'})
    assert res.status_code == 401
    assert res.get_json()['code'] == constants.E_USER_AUTH_FAILED

    res = client.post('/api/v1/auth/login', json={'username': 'ghost', 'password': 'nope'})
    assert res.get_json()['code'] == constants.E_USER_NOT_FOUND

    res = client.get('/api/v1/auth/users')
    assert res.status_code == 401

    token = client.post('/api/v1/auth/login', json={'username': 'admin', 'password': 'changeme'}).get_json()['data']['token']
    jwt_headers = {'Authorization': f'Bearer {token}'}

    res = client.post('/api/v1/auth/users', json={'name': 'Cook', 'username': 'cook', 'password': 'pw'}, headers=jwt_headers)
    assert res.status_code == 201
    cook = res.get_json()['data']
    assert 'password' not in cook

    res = client.get('/api/v1/auth/users', headers=jwt_headers)
    assert [u['username'] for u in res.get_json()['data']] == ['admin', 'cook']
    assert all('password' not in u for u in res.get_json()['data'])

    res = client.put(f"/api/v1/auth/users/{cook['id']}", json={'admin': True}, headers=jwt_headers)
    assert res.get_json()['data']['admin'] is True

    res = client.delete(f"/api/v1/auth/users/{cook['id']}", headers=jwt_headers)
    assert res.status_code == 200
    res = client.get(f"/api/v1/auth/users/{cook['id']}", headers=jwt_headers)
    assert res.status_code == 404


def test_api_key_administration(client, session):
    AuthService.create_user(session, 'Admin', 'admin', 'changeme', admin=True)
    token = client.post('/api/v1/auth/login', json={'username': 'admin', 'password': 'changeme'}).get_json()['data']['token']
    jwt_headers = {'Authorization': f'Bearer {token}'}

    res = client.post('/api/v1/auth/keys', json={}, headers=jwt_headers)
    assert res.status_code == 400

    key = client.post('/api/v1/auth/keys', json={'description': 'fridge'}, headers=jwt_headers).get_json()['data']
    api_headers = {'Authorization': f"Bearer {key['apikey']}"}
    assert client.get('/api/v1/categories', headers=api_headers).status_code == 200

    res = client.put(f"/api/v1/auth/keys/{key['id']}", json={'revoked': True}, headers=jwt_headers)
    assert res.get_json()['data']['revoked'] is True
    assert client.get('/api/v1/categories', headers=api_headers).status_code == 403

    res = client.get('/api/v1/auth/keys', headers=jwt_headers)
    assert [k['description'] for k in res.get_json()['data']] == ['fridge']


def test_registration_can_be_closed(app, client):
    res = client.post('/api/v1/auth/register', json={'name': 'New', 'username': 'new', 'password': 'pw'})
    assert res.status_code == 201
    assert res.get_json()['data']['admin'] is False

    app.config['ALLOW_REGISTRATION'] = False
    res = client.post('/api/v1/auth/register', json={'name': 'Late', 'username': 'late', 'password': 'pw'})
    assert res.status_code == 403
    assert res.get_json()['code'] == constants.I_NOT_ACCEPTING_NEW_USERS


def test_unknown_route_uses_the_envelope(client):
    res = client.get('/api/v1/nothing-here')
    assert res.status_code == 404
    assert res.get_json()['code'] == constants.E_NOTFOUND


def test_malformed_bodies_are_rejected_before_the_database(client, headers):
    res = client.post('/api/v1/recipes', json=[1, 2], headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_INVALIDDATA

    res = client.post('/api/v1/categories', json={'name': {'x': 1}}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_INVALIDDATA

    res = client.post('/api/v1/recipes', json={'name': 'Soup', 'comment': ['a', 'b']}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_INVALIDDATA

    res = client.get('/api/v1/recipes/%C2%B2', headers=headers)
    assert res.status_code == 400
    assert res.get_json()['code'] == constants.E_ID_NAN

    assert client.get('/api/v1/recipes', headers=headers).get_json()['data'] == []
