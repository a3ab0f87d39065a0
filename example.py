import logging

if __name__ == "__main__":
    import asyncio
    from fp_future import Future, memoise

    logging.basicConfig(level=logging.DEBUG)

    async def main():
        loop = asyncio.get_running_loop()

        def fetch_user(on_failure, on_success):
            print("fetching user...")
            loop.call_later(0.1, on_success, {"id": 1, "name": "ada"})

        def fetch_missing(on_failure, on_success):
            loop.call_later(0.1, on_failure, "404 not found")

        # Simple chaining
        name = Future(fetch_user).map(lambda user: user["name"]).map(str.title)
        print(await name)

        # Recovery on the failure channel
        fallback = Future(fetch_missing).or_else(lambda reason: Future.of({"id": 0, "name": "guest"}))
        print(await fallback)

        # One fetch, many consumers
        shared = memoise(fetch_user)
        shared.map(lambda user: user["id"]).fork(print, print)
        shared.map(lambda user: user["name"]).fork(print, print)
        print(await shared.fold(lambda reason: None, lambda user: len(user)))

    asyncio.run(main())
