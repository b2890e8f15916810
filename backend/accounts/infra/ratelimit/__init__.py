from accounts.infra.ratelimit.limits_rate_counter import LimitsRateCounter

__all__ = ["LimitsRateCounter"]
