"""Feature module package.

Add feature modules as packages under ``admin_registry/modules/<name>/``
with an ``extensions.py`` module that exports ``register(registry)``.
Modules are auto-discovered at startup and contribute their nav items,
dashboard cards, admin views and quick actions from that hook.
"""
