"""Example: track an app session against a Mautic instance."""

import asyncio

from mautic_tracking import MauticTracking
from mautic_tracking.observability import configure

configure("mautic_tracking_example", debug=True)


async def main():
    tracking = MauticTracking(
        "https://mautic.example.com",
        app_name="MyApp",
        userid="contact@email.com",
        app_version="1.0.0",
        app_bundle_name="com.mydomain.myapp",
    )

    # Await each call so the identity cookies from one hit reach the next
    await tracking.track_app_start()
    await tracking.track_screen("main", "Main Page")
    await tracking.track_event("click", "Click Get Start Button", "home", "Home Page")
    await tracking.add_tag({"a", "b"})

    print(f"Contact id: {tracking.cookies.contact.value or '(none yet)'}")


if __name__ == "__main__":
    asyncio.run(main())
