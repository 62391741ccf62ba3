from main import app
from utils.rate_limiter import RateLimiter, auth_rate_limiter


def test_auth_rate_limiting(client):
    # Override the rate limiter dependency with a strict one for this test
    test_limiter = RateLimiter(requests_limit=5, time_window=60)
    app.dependency_overrides[auth_rate_limiter] = test_limiter

    url = "/token"
    # Valid form data structure required by OAuth2PasswordRequestForm
    data = {"username": "test@example.com", "password": "password"}

    for i in range(5):
        response = client.post(url, data=data)
        assert response.status_code != 429, f"Request {i+1} was rate limited unexpectedly"

    # The 6th request should be rate limited
    response = client.post(url, data=data)
    assert response.status_code == 429, "6th request should have been rate limited"
    assert response.json()["detail"] == "Too many requests. Please try again later."

def test_register_rate_limiting(client):
    test_limiter = RateLimiter(requests_limit=5, time_window=60)
    app.dependency_overrides[auth_rate_limiter] = test_limiter

    url = "/register"
    data = {"email": "rate_limit@example.com", "password": "password", "full_name": "Rate Limit"}

    for i in range(5):
        response = client.post(url, json=data)
        assert response.status_code != 429, f"Request {i+1} was rate limited unexpectedly"

    response = client.post(url, json=data)
    assert response.status_code == 429

def test_proxy_rate_limiting(client):
    """Verify that X-Forwarded-For is respected to prevent shared rate limits behind a proxy"""
    test_limiter = RateLimiter(requests_limit=1, time_window=60)
    app.dependency_overrides[auth_rate_limiter] = test_limiter

    url = "/token"
    data = {"username": "test@example.com", "password": "password"}

    headers_a = {"X-Forwarded-For": "10.0.0.1"}
    response = client.post(url, data=data, headers=headers_a)
    assert response.status_code != 429

    # A different client behind the same proxy is not blocked
    headers_b = {"X-Forwarded-For": "10.0.0.2"}
    response = client.post(url, data=data, headers=headers_b)
    assert response.status_code != 429, "Rate limiter failed to distinguish users via X-Forwarded-For"

    response = client.post(url, data=data, headers=headers_a)
    assert response.status_code == 429, "Rate limiter failed to block repeat request from User A"

def test_window_slides(client):
    test_limiter = RateLimiter(requests_limit=1, time_window=60)
    app.dependency_overrides[auth_rate_limiter] = test_limiter
    data = {"username": "test@example.com", "password": "password"}

    assert client.post("/token", data=data).status_code != 429
    assert client.post("/token", data=data).status_code == 429

    # Age the recorded request past the window
    for timestamps in test_limiter.ip_requests.values():
        for i in range(len(timestamps)):
            timestamps[i] -= 60

    assert client.post("/token", data=data).status_code != 429

def test_reset_clears_history(client):
    test_limiter = RateLimiter(requests_limit=1, time_window=60)
    app.dependency_overrides[auth_rate_limiter] = test_limiter
    data = {"username": "test@example.com", "password": "password"}

    client.post("/token", data=data)
    assert client.post("/token", data=data).status_code == 429

    test_limiter.reset()
    assert client.post("/token", data=data).status_code != 429
