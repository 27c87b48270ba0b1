"""
heritage_pipeline.pipelines — End-to-end pipeline orchestrators.

    from heritage_pipeline.pipelines import unclaimed_lands

    result = await unclaimed_lands.run(cities=["嘉義市"])
"""
