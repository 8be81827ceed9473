#  Mission Control - Dependency Injection Container
#
#  DeclarativeContainer wiring the store, event log, live channel and
#  workflow engine. Replaces module-level singletons with injectable providers.
#
#  Depends on: db/connection.py, services/*
#  Used by:    app.py, routes/*

from dependency_injector import containers, providers

from mission_control.db.connection import Database
from mission_control.services.auth import TokenAuthenticator
from mission_control.services.broadcaster import EventBroadcaster
from mission_control.services.event_log import EventLog
from mission_control.services.workflow import WorkflowEngine


class Container(containers.DeclarativeContainer):
    """DI container for Mission Control.

    All services are Singletons: one instance per application lifecycle.
    Routes access them via @inject + Depends(Provide[Container.xxx]).
    Tests override them via container.xxx.override(providers.Object(obj)).
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "mission_control.routes.events",
            "mission_control.routes.projects",
            "mission_control.routes.missions",
            "mission_control.routes.tasks",
            "mission_control.routes.approvals",
            "mission_control.routes.agents",
            "mission_control.routes.seed",
        ]
    )

    # --- Core ---
    db = providers.Singleton(Database)
    auth = providers.Singleton(TokenAuthenticator)

    # --- Events ---
    event_log = providers.Singleton(EventLog, db=db)
    broadcaster = providers.Singleton(EventBroadcaster)

    # --- Workflow (depends on all of the above) ---
    workflow = providers.Singleton(
        WorkflowEngine,
        db=db,
        event_log=event_log,
        broadcaster=broadcaster,
    )
