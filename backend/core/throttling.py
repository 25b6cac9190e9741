from rest_framework.throttling import SimpleRateThrottle


class MutationActorThrottle(SimpleRateThrottle):
    scope = "mutation_actor"

    def get_cache_key(self, request, view):
        actor = getattr(request, "actor", None) or self.get_ident(request)
        return self.cache_format % {"scope": self.scope, "ident": actor}

    def allow_request(self, request, view):
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            return super().allow_request(request, view)
        return True
