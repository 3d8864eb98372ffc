# config/deploy.example.py
# Copy to config/deploy.py and adjust; `uberdeploy tasks` lists what you can run.
from __future__ import annotations


def configure(d):
    d.set("user", "alice")
    d.set("server", "lyra.uberspace.de")
    d.set("application", "shop")
    d.set("repository", "git@github.com:alice/shop.git")
    d.set("domain", "shop.example.com")
    d.set("branch", "main")
    d.set("keep_releases", 5)

    with d.namespace("deploy"):
        @d.task("migrate", "Run pending migrations in the new release")
        def migrate(ctx):
            ctx.executor.run_remote(
                f"cd {ctx.fetch('release_path')} && bundle exec rake db:migrate RAILS_ENV=production"
            )

    d.before("deploy:create_symlink", "deploy:migrate")
