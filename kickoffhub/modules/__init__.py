"""
Feature Modules

Jedes Unterverzeichnis mit ``__init__.py`` ist ein Modul. Der Loader ruft
``register(context)`` (oder ``default``) genau einmal auf; ``context.container``
ist der prozessweite Container. Rückgabe: ``ModuleManifest``, ein dict mit
denselben Keys (name, base_path, routes, public_routes, private_routes,
public_api, tasks) oder ``None``. ``register`` darf async sein.

Module werden in Namensreihenfolge geladen, ``api_football`` also vor ``teams``.
"""
