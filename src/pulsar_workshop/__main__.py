from pulsar_workshop.scenarios import app

app(prog_name="pulsar-workshop")
