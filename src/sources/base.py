from src.core.models import SceneQuery, SourceProfile, SourceResult


class SceneSource:
    """
    Interface for every scene backend (live search, scrape, catalog, synthetic).
    Any new source must inherit from this class and be listed in the acquisition chain.
    """

    # Every source must declare its capabilities
    profile: SourceProfile

    def search(self, query: SceneQuery, limit: int) -> SourceResult:
        """
        Finds scenes for a product.

        Args:
            query: Product type, style and caller keywords.
            limit: Maximum number of raw scenes wanted, already capped at
                `profile.max_results`.

        Returns:
            SourceResult; a failure result for network or parse problems,
            never an exception.
        """
        raise NotImplementedError("Subclasses must implement search()")

    def capped(self, requested: int) -> int:
        return max(0, min(requested, self.profile.max_results))
