"""Greeting endpoints."""

from microserve.routing import RequestParam, get_mapping, rest_controller


@rest_controller
class GreetingController:

    @get_mapping("/greeting")
    @staticmethod
    def greeting(name=RequestParam("name", "World")):
        return "Hola " + name

    @get_mapping("/hello")
    @staticmethod
    def hello_service(name=RequestParam("name", "World"), age=RequestParam("age", "0")):
        return f"Hola hola {name}, tienes {age} años"

    @get_mapping("/status")
    @staticmethod
    def status():
        return "El servidor está funcionando correctamente"

    @get_mapping("/welcome")
    @staticmethod
    def welcome(
        name=RequestParam("name", "Usuario"),
        age=RequestParam("age", "0"),
        city=RequestParam("city", "Ciudad Desconocida"),
    ):
        return f"Bienvenido {name}, tienes {age} años y vives en {city}"
