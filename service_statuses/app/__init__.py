"""
Statuses service package for Birdhouse.

Renders status pages server-side from an interchangeable upstream and
delegates page caching to shared caches through Cache-Control.

Structure:
- app.main: FastAPI app, routes and wiring.
- app.domain: Records, boundary validation and page resolution.
- app.sources: Upstream strategies (repository, REST, GraphQL).
- app.storage: In-memory fixtures and the SQLAlchemy repository.
- app.schema: GraphQL schema served at /api/graphql.
- app.caching: Cache-Control directive composition.
"""
