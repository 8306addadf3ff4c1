"""Tests for the sliding-window rate limiter."""

from gymnasaas.security import RateLimiter, escape_like, get_limit_for_route


class TestRouteLimits:
    def test_longest_prefix_wins(self):
        assert get_limit_for_route("/api/billing/checkout") == ("/api/billing/checkout", 10, 60)
        assert get_limit_for_route("/api/super-admin/overview") == ("/api/super-admin", 50, 60)

    def test_default_limit(self):
        assert get_limit_for_route("/api/groups") == ("/api/groups", 100, 60)


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter()
        results = [limiter.hit("ip:1", 3, 60, now=100.0 + i) for i in range(3)]

        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == [2, 1, 0]

    def test_blocks_over_limit(self):
        limiter = RateLimiter()
        for i in range(3):
            limiter.hit("ip:1", 3, 60, now=100.0 + i)

        result = limiter.hit("ip:1", 3, 60, now=110.0)
        assert result.allowed is False
        assert result.remaining == 0
        assert result.reset_in == 50

    def test_window_slides(self):
        limiter = RateLimiter()
        for i in range(3):
            limiter.hit("ip:1", 3, 60, now=100.0 + i)

        assert limiter.hit("ip:1", 3, 60, now=161.0).allowed is True

    def test_keys_are_independent(self):
        limiter = RateLimiter()
        limiter.hit("ip:1", 1, 60, now=100.0)
        assert limiter.hit("ip:2", 1, 60, now=100.0).allowed is True

    def test_idle_keys_are_dropped(self):
        limiter = RateLimiter()
        for i in range(1000):
            limiter.hit(f"ip:1:/api/academies/{i}", now=0.0)
        assert len(limiter) == 1000

        limiter.hit("ip:1:/api/groups", now=1000.0)

        assert len(limiter) == 1

    def test_expired_key_is_removed_on_next_hit(self):
        limiter = RateLimiter()
        limiter.hit("ip:1", 1, 60, now=0.0)
        limiter.hit("ip:2", 1, 60, now=30.0)

        assert limiter.hit("ip:1", 1, 60, now=61.0).allowed is True
        assert len(limiter) == 2

    def test_reset(self):
        limiter = RateLimiter()
        limiter.hit("ip:1", 1, 60, now=100.0)
        limiter.reset()
        assert limiter.hit("ip:1", 1, 60, now=100.0).allowed is True


class TestRateLimitMiddleware:
    def test_headers_on_success(self, client):
        response = client.get("/api/public/academies")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "99"

    def test_checkout_is_limited(self, client):
        for _ in range(10):
            client.post("/api/billing/checkout", json={})

        response = client.post("/api/billing/checkout", json={})

        assert response.status_code == 429
        assert response.json()["error"] == "RATE_LIMIT_EXCEEDED"
        assert "Retry-After" in response.headers

    def test_health_is_exempt(self, client):
        response = client.get("/health")
        assert "X-RateLimit-Limit" not in response.headers


class TestEscapeLike:
    def test_escapes_wildcards(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
